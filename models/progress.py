from typing import Dict, List, Optional

from pydantic import Field

from .base import CamelModel


class ProgressCreate(CamelModel):
    week_id: Optional[str] = None
    completed: bool = False


class ProgressRecord(CamelModel):
    user_id: str
    week_id: str
    completed: bool = False
    last_accessed: str


class ProgressSummary(CamelModel):
    subject_id: str
    completed: int
    total: int
    percent: int


class QuizSubmission(CamelModel):
    # question index -> selected option index
    answers: Dict[int, int] = Field(default_factory=dict)


class QuizResult(CamelModel):
    correct: int
    total: int
    percent: int
    sample_answers: Dict[int, Optional[str]] = Field(default_factory=dict)
    incorrect: List[int] = Field(default_factory=list)
