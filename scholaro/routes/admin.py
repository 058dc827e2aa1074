import logging

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..config import settings
from ..seed import seed_sample_data
from ..utils.cache import UNIVERSITIES_NAMESPACE, invalidate_cache
from ..utils.database import get_database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.post("/seed-data")
async def seed_data(db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Insert the demonstration universities and questions.
    Disabled unless ALLOW_SEED_DATA is set; repeated calls duplicate rows.
    """
    if not settings.ALLOW_SEED_DATA:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Seeding is disabled")

    counts = await seed_sample_data(db)
    await invalidate_cache(UNIVERSITIES_NAMESPACE)
    return {"message": "Sample data seeded successfully", **counts}
