from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class Requirements(CamelModel):
    gre: bool = False
    gmat: bool = False
    ielts: bool = False
    toefl: bool = False


class UniversityBase(CamelModel):
    name: str = Field(min_length=1)
    country: str = Field(min_length=1)
    ranking: Optional[int] = Field(default=None, ge=1)
    tuition_fee: str
    scholarships: List[str] = []
    requirements: Requirements = Requirements()
    description: Optional[str] = None
    website: Optional[str] = None


class University(UniversityBase):
    id: str


class UniversityCreated(CamelModel):
    message: str
    university: University
