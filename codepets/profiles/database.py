from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timezone
from typing import Optional


class ProfileConflictError(Exception):
    """The stored profile changed between read and write"""

    def __init__(self, uid: str, version: int):
        super().__init__(f"Profile {uid} was modified concurrently (expected version {version})")
        self.uid = uid
        self.version = version


# ==================== PROFILE CRUD ====================

async def get_profile(db: AsyncIOMotorDatabase, uid: str) -> Optional[dict]:
    """Get profile by uid"""
    return await db.user_profiles.find_one({"uid": uid}, {"_id": 0})


async def insert_profile(db: AsyncIOMotorDatabase, doc: dict) -> dict:
    """
    Insert a new profile
    Raises DuplicateKeyError when another request created it first (unique uid index)
    """
    await db.user_profiles.insert_one(dict(doc))
    return doc


async def save_profile(db: AsyncIOMotorDatabase, doc: dict) -> dict:
    """
    Overwrite the whole profile document, guarded by its version

    The write only lands if the stored version still equals doc["version"];
    the saved document carries version + 1.

    Raises:
        ProfileConflictError: another write got there first
    """
    expected = doc.get("version", 0)
    updated = dict(doc)
    updated["version"] = expected + 1
    updated["updated_at"] = datetime.now(timezone.utc)

    query = {"uid": doc["uid"], "version": expected}
    if "version" not in doc:
        # Profile stored before versioning; first save adds the field
        query["version"] = {"$exists": False}

    result = await db.user_profiles.replace_one(query, updated)
    if result.matched_count == 0:
        raise ProfileConflictError(doc["uid"], expected)

    return updated
