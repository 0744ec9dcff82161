from pydantic import BaseModel, Field
from typing import List
from enum import Enum

# ==================== ENUMS ====================

class Grade(str, Enum):
    NONE = "none"
    SILVER = "silver"
    GOLD = "gold"

# ==================== CATALOG MODELS ====================

class SubLevel(BaseModel):
    number: int = Field(..., ge=1)
    title: str
    description: str = ""
    xp: int = Field(20, ge=0)

class TheoreticalQuiz(BaseModel):
    max_score: int = Field(100, ge=1)

class CourseDefinition(BaseModel):
    course_id: int
    title: str
    description: str = ""
    language: str = "java"
    order: int = 0
    sub_levels: List[SubLevel] = []
    theoretical: TheoreticalQuiz = Field(default_factory=TheoreticalQuiz)

    def sub_level(self, number: int):
        for level in self.sub_levels:
            if level.number == number:
                return level
        return None

    @property
    def last_sub_level(self) -> int:
        return max((level.number for level in self.sub_levels), default=1)

# ==================== USER PROGRESS MODELS ====================

class TheoreticalRecord(BaseModel):
    score: int = 0
    grade: Grade = Grade.NONE

class CourseProgress(BaseModel):
    """What the user owns for one course; catalog fields are merged in on read"""
    course_id: int
    current: int = 1
    completed_sub_levels: List[int] = []
    theoretical: TheoreticalRecord = Field(default_factory=TheoreticalRecord)
