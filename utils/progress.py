from __future__ import annotations

import math
from typing import Iterable, List

from db.kv_store import KVStore
from models.progress import ProgressRecord
from models.week import Week
from utils.ids import utc_now_iso

PROGRESS_PREFIX = "progress:"


def student_progress_prefix(student_id: str) -> str:
    return f"{PROGRESS_PREFIX}{student_id}:"


def progress_key(student_id: str, week_id: str) -> str:
    return f"{student_progress_prefix(student_id)}{week_id}"


def record_progress(store: KVStore, student_id: str, week_id: str, completed: bool) -> ProgressRecord:
    """Upsert the (student, week) record; the last write wins and lastAccessed always moves."""
    record = ProgressRecord(
        user_id=student_id,
        week_id=week_id,
        completed=bool(completed),
        last_accessed=utc_now_iso(),
    )
    store.set(progress_key(student_id, week_id), record.to_record())
    return record


def list_progress(store: KVStore, student_id: str) -> List[ProgressRecord]:
    return [ProgressRecord.model_validate(item) for item in store.scan_by_prefix(student_progress_prefix(student_id))]


def is_completed(progress: Iterable[ProgressRecord], week_id: str) -> bool:
    return any(item.week_id == week_id and item.completed for item in progress)


def is_started(progress: Iterable[ProgressRecord], week_id: str) -> bool:
    return any(item.week_id == week_id for item in progress)


def completed_week_count(progress: Iterable[ProgressRecord], published_weeks: Iterable[Week]) -> int:
    week_ids = {week.id for week in published_weeks}
    return len({item.week_id for item in progress if item.completed and item.week_id in week_ids})


def course_progress_percent(progress: Iterable[ProgressRecord], published_weeks: Iterable[Week]) -> int:
    """Completed published weeks over all published weeks, as a whole percent (halves round up)."""
    published = list(published_weeks)
    if not published:
        return 0
    completed = completed_week_count(progress, published)
    return math.floor(completed / len(published) * 100 + 0.5)
