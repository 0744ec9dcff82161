"""
Profile service
Profile resolution plus the state transitions behind every learner endpoint:
fetch profile, apply the update, merge with the catalog, persist, respond.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from codepets.auth.firebase_auth import Identity
from codepets.courses.catalog import PETS, CourseCatalog
from codepets.courses.merge import default_progress, merge_courses
from codepets.courses.models import CourseDefinition, Grade
from codepets.courses.xp import grade_for_score, grade_xp_delta, resolve_next_level
from codepets.profiles.database import get_profile, insert_profile, save_profile
from codepets.validation.registry import get_rule_set

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Submitted code does not satisfy every rule"


def completion_badge(course_id: int) -> str:
    return f"course-{course_id}-complete"


def theory_gold_badge(course_id: int) -> str:
    return f"course-{course_id}-theory-gold"


# ==================== PROFILE RESOLUTION ====================

def new_profile_document(identity: Identity, courses: List[CourseDefinition]) -> dict:
    """Default profile: level 1, no XP, one not-started entry per catalog course"""
    now = datetime.now(timezone.utc)
    return {
        "uid": identity.uid,
        "email": identity.email,
        "version": 0,
        "profile": {
            "avatar": None,
            "level": 1,
            "current_xp": 0,
            "total_xp": 0,
            "badges": [],
        },
        "progress": {
            "goals": [],
            "courses": [default_progress(course.course_id) for course in courses],
        },
        "created_at": now,
        "updated_at": now,
    }


async def resolve_profile(db: AsyncIOMotorDatabase, identity: Identity, catalog: CourseCatalog) -> dict:
    """Return the caller's profile, creating and persisting the default one on first use"""
    doc = await get_profile(db, identity.uid)
    if doc:
        return doc

    courses = await catalog.get_courses(db)
    doc = new_profile_document(identity, courses)
    try:
        await insert_profile(db, doc)
        logger.info("Created profile for uid=%s", identity.uid)
        return doc
    except DuplicateKeyError:
        # Concurrent first request won the insert
        existing = await get_profile(db, identity.uid)
        if existing is None:
            raise
        return existing


def to_response(doc: dict, courses: List[CourseDefinition]) -> dict:
    """Public profile shape with courses merged onto the catalog"""
    progress = doc.get("progress") or {}
    return {
        "uid": doc["uid"],
        "email": doc.get("email"),
        "profile": doc["profile"],
        "progress": {
            "goals": progress.get("goals", []),
            "courses": merge_courses(courses, progress.get("courses", [])),
        },
    }


async def get_profile_view(db: AsyncIOMotorDatabase, identity: Identity, catalog: CourseCatalog) -> dict:
    doc = await resolve_profile(db, identity, catalog)
    return to_response(doc, await catalog.get_courses(db))


# ==================== HELPERS ====================

def _course_entry(doc: dict, course_id: int) -> dict:
    """The user's stored progress for a course, added as not-started when missing"""
    courses = doc.setdefault("progress", {}).setdefault("courses", [])
    for entry in courses:
        if entry.get("course_id") == course_id:
            entry.setdefault("current", 1)
            entry.setdefault("completed_sub_levels", [])
            entry.setdefault("theoretical", {"score": 0, "grade": Grade.NONE.value})
            return entry

    entry = default_progress(course_id)
    courses.append(entry)
    return entry


def _add_badge(doc: dict, badge: str) -> bool:
    badges = doc["profile"].setdefault("badges", [])
    if badge in badges:
        return False
    badges.append(badge)
    return True


async def _require_course(db: AsyncIOMotorDatabase, catalog: CourseCatalog, course_id: int) -> CourseDefinition:
    course = await catalog.get_course(db, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail=f"Course {course_id} not found")
    return course


def _result(doc: dict, courses: List[CourseDefinition], **fields) -> dict:
    result = {
        "user": to_response(doc, courses),
        "error": None,
        "valid": [],
        "invalid": [],
        "xp_awarded": 0,
        "leveled_up": False,
    }
    result.update(fields)
    return result


# ==================== PET SELECTION ====================

async def select_pet(db: AsyncIOMotorDatabase, identity: Identity, catalog: CourseCatalog, pet: str) -> dict:
    if pet not in PETS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown pet '{pet}'. Choose one of: {', '.join(PETS)}"
        )

    doc = await resolve_profile(db, identity, catalog)
    if doc["profile"].get("avatar") != pet:
        doc["profile"]["avatar"] = pet
        doc = await save_profile(db, doc)

    return to_response(doc, await catalog.get_courses(db))


# ==================== THEORETICAL SCORE ====================

async def submit_theoretical(
    db: AsyncIOMotorDatabase,
    identity: Identity,
    catalog: CourseCatalog,
    course_id: int,
    score: int
) -> dict:
    """
    Record a theoretical quiz score

    The stored score only ever goes up. XP is the difference between the grade
    tier reached and the tier already held, so each tier pays out once.
    """
    course = await _require_course(db, catalog, course_id)
    max_score = course.theoretical.max_score
    if score > max_score:
        raise HTTPException(status_code=400, detail=f"Score must be between 0 and {max_score}")

    doc = copy.deepcopy(await resolve_profile(db, identity, catalog))
    entry = _course_entry(doc, course_id)
    record = entry["theoretical"]
    courses = await catalog.get_courses(db)

    if score <= record.get("score", 0):
        return _result(doc, courses)

    old_grade = Grade(record.get("grade", Grade.NONE.value))
    new_grade = grade_for_score(round(score * 100 / max_score))
    award = grade_xp_delta(old_grade, new_grade)

    record["score"] = score
    if award > 0:
        record["grade"] = new_grade.value

    leveled_up = resolve_next_level(doc["profile"], award)
    if record["grade"] == Grade.GOLD.value:
        _add_badge(doc, theory_gold_badge(course_id))

    doc = await save_profile(db, doc)
    logger.info(
        "Theoretical score uid=%s course=%s score=%s grade=%s xp=+%s",
        identity.uid, course_id, score, record["grade"], award
    )
    return _result(doc, courses, xp_awarded=award, leveled_up=leveled_up)


# ==================== SUB-LEVEL VALIDATION ====================

async def submit_sub_level(
    db: AsyncIOMotorDatabase,
    identity: Identity,
    catalog: CourseCatalog,
    course_id: int,
    sub_level: int,
    code: str
) -> dict:
    """
    Validate a sub-level submission and apply its progress

    Any violated rule leaves the profile untouched and reports both rule lists.
    A full pass advances `current`, records the sub-level as completed and
    awards its XP unless it was completed before.
    """
    course = await _require_course(db, catalog, course_id)
    level = course.sub_level(sub_level)
    rule_set = get_rule_set(course_id, sub_level)
    if level is None or rule_set is None:
        raise HTTPException(status_code=404, detail=f"Sub-level {sub_level} not found in course {course_id}")

    doc = copy.deepcopy(await resolve_profile(db, identity, catalog))
    entry = _course_entry(doc, course_id)
    completed = entry["completed_sub_levels"]
    courses = await catalog.get_courses(db)

    if sub_level > entry["current"] and sub_level not in completed:
        raise HTTPException(status_code=403, detail=f"Sub-level {sub_level} is locked")

    result = rule_set.validate(code)
    if not result.passed:
        logger.debug("Validation failed uid=%s course=%s sub_level=%s invalid=%s",
                     identity.uid, course_id, sub_level, result.invalid)
        return _result(doc, courses, error=VALIDATION_FAILED, valid=result.valid, invalid=result.invalid)

    changed = False
    award = 0
    leveled_up = False

    if sub_level not in completed:
        completed.append(sub_level)
        award = level.xp
        leveled_up = resolve_next_level(doc["profile"], award)
        changed = True

    next_current = max(entry["current"], min(sub_level + 1, course.last_sub_level))
    if next_current != entry["current"]:
        entry["current"] = next_current
        changed = True

    all_levels = {item.number for item in course.sub_levels}
    if all_levels.issubset(completed) and _add_badge(doc, completion_badge(course_id)):
        changed = True

    if changed:
        doc = await save_profile(db, doc)
        logger.info("Sub-level passed uid=%s course=%s sub_level=%s xp=+%s",
                    identity.uid, course_id, sub_level, award)

    return _result(doc, courses, valid=result.valid, xp_awarded=award, leveled_up=leveled_up)
