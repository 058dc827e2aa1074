import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from ..models.question import (
    AnswerCheck,
    AnswerResult,
    DifficultyLevel,
    Question,
    QuestionBase,
    QuestionPublic,
)
from ..models.test_result import DashboardStats, TestResult, TestResultBase, TestResultCreated
from ..utils.database import (
    QUESTIONS,
    TEST_RESULTS,
    USERS,
    get_database,
    parse_object_id,
    serialize_doc,
    utc_now,
)
from ..utils.security import TokenPayload, get_current_admin, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["test"])

RECENT_RESULTS_LIMIT = 10

# Answers are revealed only through /check-answer
HIDDEN_QUESTION_FIELDS = {"correct_answer": 0, "explanation": 0}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@router.post("/test-results", response_model=TestResultCreated, status_code=status.HTTP_201_CREATED)
async def submit_test(
    test_data: TestResultBase,
    current_user: TokenPayload = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    user_id = parse_object_id(current_user.sub)
    if user_id is None or not await db[USERS].find_one({"_id": user_id}, {"_id": 1}):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    test_dict = test_data.model_dump()
    test_dict.update({"user_id": user_id, "date": utc_now()})
    try:
        await db[TEST_RESULTS].insert_one(test_dict)
    except PyMongoError:
        logger.exception("Error saving test result")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving test result",
        )

    return {"message": "Test result saved successfully", "result": serialize_doc(test_dict)}


@router.get("/test-results", response_model=List[TestResult])
async def get_user_results(
    current_user: TokenPayload = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    The caller's most recent results, newest first
    """
    results = await db[TEST_RESULTS].find(
        {"user_id": parse_object_id(current_user.sub)}
    ).sort([("date", DESCENDING), ("_id", DESCENDING)]).limit(RECENT_RESULTS_LIMIT).to_list(
        RECENT_RESULTS_LIMIT
    )
    return [serialize_doc(r) for r in results]


@router.get("/dashboard-stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: TokenPayload = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    stats = await db[TEST_RESULTS].aggregate([
        {"$match": {"user_id": parse_object_id(current_user.sub)}},
        {"$group": {
            "_id": None,
            "count": {"$sum": 1},
            "avgScore": {"$avg": "$score"},
            "totalTime": {"$sum": "$time_spent"},
        }},
    ]).to_list(1)

    if not stats:
        return {"tests_completed": 0, "average_score": 0, "total_study_time": 0}

    row = stats[0]
    return {
        "tests_completed": row["count"],
        "average_score": round_half_up(row["avgScore"] or 0),
        "total_study_time": round_half_up(row["totalTime"] or 0),
    }


@router.get("/questions/{test_type}/{section}", response_model=List[QuestionPublic])
async def get_questions(
    test_type: str,
    section: str,
    limit: int = Query(10, ge=1, le=100),
    difficulty: Optional[DifficultyLevel] = None,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    query = {"test_type": test_type, "section": section}
    if difficulty:
        query["difficulty"] = difficulty.value

    questions = await db[QUESTIONS].find(
        query, HIDDEN_QUESTION_FIELDS
    ).sort("_id", DESCENDING).limit(limit).to_list(limit)
    return [serialize_doc(q) for q in questions]


@router.post("/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    question: QuestionBase,
    current_user: TokenPayload = Depends(get_current_admin),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Create a new practice question (admin only)
    """
    question_dict = question.model_dump(mode="json")
    await db[QUESTIONS].insert_one(question_dict)
    logger.info(
        "Admin %s created question in %s/%s",
        current_user.sub, question.test_type, question.section,
    )
    return serialize_doc(question_dict)


@router.post("/check-answer", response_model=AnswerResult)
async def check_answer(answer: AnswerCheck, db: AsyncIOMotorDatabase = Depends(get_database)):
    question_id = parse_object_id(answer.question_id)
    question = await db[QUESTIONS].find_one({"_id": question_id}) if question_id else None
    if not question:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    return {
        "correct": question["correct_answer"] == answer.user_answer,
        "correct_answer": question["correct_answer"],
        "explanation": question.get("explanation"),
    }
