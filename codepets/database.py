import logging
from typing import Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from codepets.config import settings

logger = logging.getLogger(__name__)


class MongoManager:
    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        self.client = AsyncIOMotorClient(settings.MONGO_URL)
        self.db = self.client[settings.MONGO_DB_NAME]
        logger.info("Connected to MongoDB database %s", settings.MONGO_DB_NAME)

    async def disconnect(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

    async def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception:
            logger.exception("MongoDB ping failed")
            return False


manager = MongoManager()


async def create_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes used by the profile and catalog lookups"""
    await db.user_profiles.create_index("uid", unique=True)
    await db.courses.create_index("course_id", unique=True)
    await db.courses.create_index("order")
    logger.info("Indexes created")


# ==================== DEPENDENCY ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    if manager.db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return manager.db
