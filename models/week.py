from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import Field, field_validator

from utils.links import normalize_content_links
from .base import CamelModel


class ContentItem(CamelModel):
    url: str
    title: str = ""


class McqQuestion(CamelModel):
    type: Literal["mcq"] = "mcq"
    question: str = ""
    options: List[str] = Field(default_factory=lambda: ["", "", "", ""])
    correct_answer: int = 0


class ShortAnswerQuestion(CamelModel):
    type: Literal["short_answer"] = "short_answer"
    question: str = ""
    sample_answer: Optional[str] = None


Question = Annotated[Union[McqQuestion, ShortAnswerQuestion], Field(discriminator="type")]


def normalize_questions(raw: Any) -> List[Any]:
    """Tag legacy questions that predate short answers as multiple choice."""
    if not raw:
        return []
    questions = []
    for item in raw:
        if isinstance(item, dict) and not item.get("type"):
            item = {**item, "type": "mcq"}
        questions.append(item)
    return questions


class WeekContent(CamelModel):
    """Link collections and questions shared by create, update and stored weeks."""

    @field_validator("video_links", "audio_links", "pdf_links", mode="before", check_fields=False)
    @classmethod
    def _normalize_links(cls, value):
        # null and legacy bare strings both arrive here
        return normalize_content_links(value)

    @field_validator("questions", mode="before", check_fields=False)
    @classmethod
    def _normalize_questions(cls, value):
        return normalize_questions(value)


class WeekCreate(WeekContent):
    subject_id: Optional[str] = None
    week_number: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    published: bool = False
    video_links: List[ContentItem] = Field(default_factory=list)
    audio_links: List[ContentItem] = Field(default_factory=list)
    pdf_links: List[ContentItem] = Field(default_factory=list)
    questions: List[Question] = Field(default_factory=list)


class WeekUpdate(WeekContent):
    week_number: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    published: Optional[bool] = None
    video_links: Optional[List[ContentItem]] = None
    audio_links: Optional[List[ContentItem]] = None
    pdf_links: Optional[List[ContentItem]] = None
    questions: Optional[List[Question]] = None


class Week(WeekContent):
    id: str
    subject_id: str
    week_number: int
    title: str
    description: Optional[str] = None
    published: bool = False
    video_links: List[ContentItem] = Field(default_factory=list)
    audio_links: List[ContentItem] = Field(default_factory=list)
    pdf_links: List[ContentItem] = Field(default_factory=list)
    questions: List[Question] = Field(default_factory=list)
    created_at: str = ""
