from typing import Optional

from .base import CamelModel


class SubjectCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class Subject(CamelModel):
    id: str
    name: str
    description: str = ""
    created_at: str
