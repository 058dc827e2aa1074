import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..config import settings

logger = logging.getLogger(__name__)

USERS = "users"
TEST_RESULTS = "test_results"
UNIVERSITIES = "universities"
QUESTIONS = "questions"


class MongoState:
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None


mongo = MongoState()


async def connect_to_db():
    """
    Open the process-wide Motor client and make sure indexes exist
    """
    logger.info("Connecting to MongoDB database %s", settings.MONGODB_DB)
    mongo.client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
    mongo.db = mongo.client[settings.MONGODB_DB]
    await ensure_indexes(mongo.db)


async def close_db_connection():
    if mongo.client is not None:
        mongo.client.close()
        logger.info("MongoDB connection closed")
    mongo.client = None
    mongo.db = None


def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency returning the active database handle
    """
    if mongo.db is None:
        raise RuntimeError("Database is not connected")
    return mongo.db


async def ensure_indexes(db: AsyncIOMotorDatabase):
    await db[USERS].create_index("email", unique=True)
    await db[TEST_RESULTS].create_index([("user_id", ASCENDING), ("date", DESCENDING)])
    await db[UNIVERSITIES].create_index("ranking")
    await db[UNIVERSITIES].create_index("country")
    await db[QUESTIONS].create_index(
        [("test_type", ASCENDING), ("section", ASCENDING), ("difficulty", ASCENDING)]
    )


def parse_object_id(value: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def utc_now() -> datetime:
    """
    Current UTC time at BSON precision, so a stored value reads back unchanged
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def serialize_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace Mongo's ``_id`` with a string ``id`` and stringify ObjectId references
    """
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    for key, value in out.items():
        if isinstance(value, ObjectId):
            out[key] = str(value)
    return out
