from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from codepets.auth.firebase_auth import Identity, get_current_identity
from codepets.courses.catalog import CourseCatalog, get_catalog
from codepets.database import get_db
from codepets.profiles import service
from codepets.profiles.models import (
    CodeSubmission, PetSelection, SubmissionResult,
    TheoreticalSubmission, UserProfileOut
)

router = APIRouter(tags=["Profile"])

# ==================== PROFILE ====================

@router.get("/profile", response_model=UserProfileOut)
async def get_my_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db),
    catalog: CourseCatalog = Depends(get_catalog)
):
    """
    Get the caller's profile
    Created with defaults on the first authenticated request
    """
    return await service.get_profile_view(db, identity, catalog)


@router.put("/select-pet", response_model=UserProfileOut)
async def select_pet(
    data: PetSelection,
    identity: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db),
    catalog: CourseCatalog = Depends(get_catalog)
):
    """Choose the pet used as the profile avatar"""
    return await service.select_pet(db, identity, catalog, data.pet)

# ==================== VALIDATION ====================

@router.post("/validate/course/{course_id}/theoretical", response_model=SubmissionResult)
async def validate_theoretical(
    course_id: int,
    data: TheoreticalSubmission,
    identity: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db),
    catalog: CourseCatalog = Depends(get_catalog)
):
    """Record a theoretical quiz score; only an improved score is stored"""
    return await service.submit_theoretical(db, identity, catalog, course_id, data.score)


@router.post("/validate/course/{course_id}/{sub_level}", response_model=SubmissionResult)
async def validate_sub_level(
    course_id: int,
    sub_level: int,
    data: CodeSubmission,
    identity: Identity = Depends(get_current_identity),
    db: AsyncIOMotorDatabase = Depends(get_db),
    catalog: CourseCatalog = Depends(get_catalog)
):
    """
    Validate a sub-level code submission

    Rule violations still answer 200, with `error` set and the
    satisfied/violated rule ids in `valid`/`invalid`.
    """
    return await service.submit_sub_level(db, identity, catalog, course_id, sub_level, data.code)
