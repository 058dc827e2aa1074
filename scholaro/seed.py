"""
Demonstration universities and practice questions.

Inserting is not idempotent: every run adds another copy of the fixtures.

Usage: python -m scholaro.seed
"""

import asyncio
import copy
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from .utils.database import QUESTIONS, UNIVERSITIES

logger = logging.getLogger(__name__)

SAMPLE_UNIVERSITIES = [
    {
        "name": "Harvard University",
        "country": "USA",
        "ranking": 1,
        "tuition_fee": "$54,002/year",
        "scholarships": ["Need-based aid up to $75,000", "Merit scholarships"],
        "requirements": {"gre": True, "gmat": False, "ielts": False, "toefl": True},
        "description": "Ivy League university in Cambridge, Massachusetts",
        "website": "https://harvard.edu",
    },
    {
        "name": "Stanford University",
        "country": "USA",
        "ranking": 2,
        "tuition_fee": "$56,169/year",
        "scholarships": ["Knight-Hennessy Scholars Program", "Stanford Graduate Fellowship"],
        "requirements": {"gre": True, "gmat": False, "ielts": False, "toefl": True},
        "description": "Private research university in California",
        "website": "https://stanford.edu",
    },
    {
        "name": "Oxford University",
        "country": "UK",
        "ranking": 3,
        "tuition_fee": "£28,370/year",
        "scholarships": ["Rhodes Scholarship", "Clarendon Fund"],
        "requirements": {"gre": False, "gmat": False, "ielts": True, "toefl": False},
        "description": "Collegiate research university in Oxford, England",
        "website": "https://ox.ac.uk",
    },
]

SAMPLE_QUESTIONS = [
    {
        "test_type": "GRE",
        "section": "Verbal",
        "question": (
            "The speaker's argument was so _______ that even her most ardent "
            "supporters began to question her position."
        ),
        "options": ["compelling", "persuasive", "unconvincing", "articulate"],
        "correct_answer": 2,
        "explanation": (
            "The context suggests supporters are questioning her position, "
            "indicating the argument was unconvincing."
        ),
        "difficulty": "medium",
    },
    {
        "test_type": "GRE",
        "section": "Quantitative",
        "question": "If x + y = 10 and x - y = 4, what is the value of x?",
        "options": ["3", "5", "7", "9"],
        "correct_answer": 2,
        "explanation": "Solving the system: x + y = 10, x - y = 4. Adding equations: 2x = 14, so x = 7.",
        "difficulty": "easy",
    },
]


async def seed_sample_data(db: AsyncIOMotorDatabase) -> dict:
    # insert_many mutates its documents by adding _id
    universities = copy.deepcopy(SAMPLE_UNIVERSITIES)
    questions = copy.deepcopy(SAMPLE_QUESTIONS)

    uni_result = await db[UNIVERSITIES].insert_many(universities)
    q_result = await db[QUESTIONS].insert_many(questions)

    counts = {
        "universities": len(uni_result.inserted_ids),
        "questions": len(q_result.inserted_ids),
    }
    logger.info("Seeded %(universities)d universities and %(questions)d questions", counts)
    return counts


async def _main():
    from .utils.cache import UNIVERSITIES_NAMESPACE, init_cache, invalidate_cache
    from .utils.database import close_db_connection, connect_to_db, get_database

    await connect_to_db()
    await init_cache()
    try:
        await seed_sample_data(get_database())
        # A running server sharing REDIS_URL would otherwise keep the old directory
        await invalidate_cache(UNIVERSITIES_NAMESPACE)
    finally:
        await close_db_connection()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
