from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from codepets.courses.catalog import CourseCatalog, get_catalog
from codepets.courses.models import CourseDefinition
from codepets.database import get_db

router = APIRouter(tags=["Courses"])


@router.get("/courses", response_model=List[CourseDefinition])
async def list_courses(
    db: AsyncIOMotorDatabase = Depends(get_db),
    catalog: CourseCatalog = Depends(get_catalog)
):
    """Global course catalog in course order"""
    return await catalog.get_courses(db)
