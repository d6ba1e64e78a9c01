from __future__ import annotations

import logging
from typing import List, Optional

from db.kv_store import KVStore
from models.subject import Subject
from utils.errors import ValidationError
from utils.ids import generate_id, utc_now_iso
from utils.weeks import subject_weeks_prefix

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "subjects:"


def subject_key(subject_id: str) -> str:
    return f"{SUBJECT_PREFIX}{subject_id}"


def create_subject(store: KVStore, name: Optional[str], description: Optional[str] = None) -> Subject:
    if not name or not name.strip():
        raise ValidationError("Subject name is required")
    subject = Subject(
        id=generate_id("subject"),
        name=name.strip(),
        description=description or "",
        created_at=utc_now_iso(),
    )
    store.set(subject_key(subject.id), subject.to_record())
    return subject


def list_subjects(store: KVStore) -> List[Subject]:
    return [Subject.model_validate(record) for record in store.scan_by_prefix(SUBJECT_PREFIX)]


def delete_subject(store: KVStore, subject_id: str) -> int:
    """Delete a subject and every week stored under it; returns the number of weeks removed.

    The subject key goes first, then each week key one by one. A week created
    under this subject while the loop runs is not seen and stays orphaned.
    Deleting an unknown subject is not an error.
    """
    store.delete(subject_key(subject_id))
    weeks = store.scan_by_prefix(subject_weeks_prefix(subject_id))
    for week in weeks:
        store.delete(f"{subject_weeks_prefix(subject_id)}{week['id']}")
    logger.info("Deleted subject %s and %d week(s)", subject_id, len(weeks))
    return len(weeks)
