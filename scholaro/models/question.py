from enum import Enum
from typing import List, Optional

from pydantic import Field, StrictInt, model_validator

from .base import CamelModel


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionPublic(CamelModel):
    """What an unauthenticated caller sees before answering."""

    id: str
    test_type: str
    section: str
    question: str
    options: List[str]
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


class QuestionBase(CamelModel):
    test_type: str = Field(min_length=1)
    section: str = Field(min_length=1)
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct_answer: int
    explanation: Optional[str] = None
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM

    @model_validator(mode="after")
    def check_correct_answer(self):
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError("correctAnswer must be a valid index into options")
        return self


class Question(QuestionBase):
    id: str


class AnswerCheck(CamelModel):
    question_id: str
    # "2" or 2.0 is not an option index
    user_answer: StrictInt


class AnswerResult(CamelModel):
    correct: bool
    correct_answer: int
    explanation: Optional[str] = None
