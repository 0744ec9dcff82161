from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

# ==================== PROFILE MODELS ====================

class ProfileStats(BaseModel):
    avatar: Optional[str] = None
    level: int = 1
    current_xp: int = 0
    total_xp: int = 0
    badges: List[str] = []

class ProgressOut(BaseModel):
    goals: List[Any] = []
    courses: List[Dict[str, Any]] = []  # catalog course merged with the user's progress

class UserProfileOut(BaseModel):
    uid: str
    email: Optional[str] = None
    profile: ProfileStats
    progress: ProgressOut

# ==================== REQUEST MODELS ====================

class PetSelection(BaseModel):
    pet: str

    @field_validator('pet')
    @classmethod
    def normalize_pet(cls, v):
        return v.strip().lower()

class CodeSubmission(BaseModel):
    code: str

    @field_validator('code')
    @classmethod
    def validate_code(cls, v):
        if len(v.encode('utf-8')) > 100 * 1024:  # 100KB
            raise ValueError('Source code too large (max 100KB)')
        return v

class TheoreticalSubmission(BaseModel):
    score: int = Field(..., ge=0, le=100)

# ==================== RESPONSE MODELS ====================

class SubmissionResult(BaseModel):
    user: UserProfileOut
    error: Optional[str] = None
    valid: List[str] = []
    invalid: List[str] = []
    xp_awarded: int = 0
    leveled_up: bool = False
