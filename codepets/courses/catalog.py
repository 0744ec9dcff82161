"""
Global course catalog
Courses live in the `courses` collection and are cached in process memory.
An empty collection is seeded with DEFAULT_CATALOG on first load.
"""

import asyncio
import logging
import time
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from codepets.config import settings
from codepets.courses.models import CourseDefinition
from codepets.courses.xp import SUB_LEVEL_XP

logger = logging.getLogger(__name__)

# Avatars a learner can hatch from the course-1 egg
PETS = ("dragon", "phoenix", "griffin", "unicorn")

# ==================== SEED CATALOG ====================

DEFAULT_CATALOG = [
    {
        "course_id": 1,
        "title": "Hatching Objects",
        "description": "Object-oriented Java: raise a pet from an Egg class.",
        "language": "java",
        "order": 1,
        "sub_levels": [
            {"number": 1, "title": "The Egg", "description": "Declare the Egg class and its fields.", "xp": SUB_LEVEL_XP},
            {"number": 2, "title": "Laying the Egg", "description": "Write a constructor that sets every field.", "xp": SUB_LEVEL_XP},
            {"number": 3, "title": "Candling", "description": "Expose the fields through getters.", "xp": SUB_LEVEL_XP},
            {"number": 4, "title": "The Pet", "description": "Declare the Pet class.", "xp": SUB_LEVEL_XP},
            {"number": 5, "title": "Hatching", "description": "Make the egg hatch into a Pet.", "xp": SUB_LEVEL_XP},
            {"number": 6, "title": "Dragons", "description": "Extend Pet and override its behaviour.", "xp": SUB_LEVEL_XP},
        ],
        "theoretical": {"max_score": 100},
    },
]


class CourseCatalog:
    """In-process cache of the course catalog, refreshed every ttl_seconds"""

    def __init__(self, ttl_seconds: int = 3600):
        self.ttl_seconds = ttl_seconds
        self._courses: Optional[List[CourseDefinition]] = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    def is_stale(self) -> bool:
        if self._courses is None:
            return True
        return time.monotonic() - self._loaded_at >= self.ttl_seconds

    def invalidate(self):
        self._courses = None
        self._loaded_at = 0.0

    async def get_courses(self, db: AsyncIOMotorDatabase) -> List[CourseDefinition]:
        """Cached catalog in course order"""
        if not self.is_stale():
            return self._courses

        async with self._lock:
            # Another request may have refreshed while we waited
            if self.is_stale():
                self._courses = await self._load(db)
                self._loaded_at = time.monotonic()
                logger.info("Course catalog refreshed: %d course(s)", len(self._courses))
        return self._courses

    async def get_course(self, db: AsyncIOMotorDatabase, course_id: int) -> Optional[CourseDefinition]:
        for course in await self.get_courses(db):
            if course.course_id == course_id:
                return course
        return None

    async def _load(self, db: AsyncIOMotorDatabase) -> List[CourseDefinition]:
        docs = await db.courses.find({}, {"_id": 0}).sort("order", 1).to_list(length=None)
        if not docs:
            await seed_catalog(db)
            docs = await db.courses.find({}, {"_id": 0}).sort("order", 1).to_list(length=None)
        return [CourseDefinition(**doc) for doc in docs]


async def seed_catalog(db: AsyncIOMotorDatabase) -> int:
    """Insert the default courses that are not stored yet"""
    inserted = 0
    for course in DEFAULT_CATALOG:
        try:
            await db.courses.insert_one(dict(course))
            inserted += 1
        except DuplicateKeyError:
            continue
    if inserted:
        logger.info("Seeded %d default course(s)", inserted)
    return inserted


catalog = CourseCatalog(ttl_seconds=settings.CATALOG_TTL_SECONDS)


# ==================== DEPENDENCY ====================

async def get_catalog() -> CourseCatalog:
    """Catalog dependency"""
    return catalog
