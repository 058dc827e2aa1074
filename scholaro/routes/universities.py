import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from ..models.university import University, UniversityBase, UniversityCreated
from ..utils.cache import UNIVERSITIES_NAMESPACE, build_key, get_cache, invalidate_cache, set_cache
from ..utils.database import UNIVERSITIES, get_database, serialize_doc
from ..utils.security import TokenPayload, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/universities", tags=["universities"])


@router.get("", response_model=List[University])
async def list_universities(
    country: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Public university directory, best ranked first
    """
    key = build_key(UNIVERSITIES_NAMESPACE, country, search)
    cached = await get_cache(key)
    if cached is not None:
        return cached

    query = {}
    if country:
        query["country"] = country
    if search:
        # User input is matched literally, not as a pattern
        query["name"] = {"$regex": re.escape(search), "$options": "i"}

    universities = await db[UNIVERSITIES].find(query).sort("ranking", ASCENDING).to_list(None)
    payload = [serialize_doc(u) for u in universities]
    await set_cache(key, payload)
    return payload


@router.post("", response_model=UniversityCreated, status_code=status.HTTP_201_CREATED)
async def add_university(
    university: UniversityBase,
    current_user: TokenPayload = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Add a university to the directory (admin only)
    """
    university_dict = university.model_dump()
    try:
        await db[UNIVERSITIES].insert_one(university_dict)
    except PyMongoError:
        logger.exception("Error adding university")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error adding university",
        )

    await invalidate_cache(UNIVERSITIES_NAMESPACE)
    logger.info("Admin %s added university %s", current_user.sub, university.name)
    return {"message": "University added successfully", "university": serialize_doc(university_dict)}
