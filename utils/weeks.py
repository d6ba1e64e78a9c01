from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from db.kv_store import KVStore
from models.week import Week, WeekCreate, WeekUpdate
from utils.errors import NotFound, ValidationError
from utils.ids import generate_id, utc_now_iso
from utils.links import filter_blank_links

WEEK_PREFIX = "weeks:"
LINK_FIELDS = ("videoLinks", "audioLinks", "pdfLinks")
# Identity fields never change after creation; subjectId is also part of the key.
IMMUTABLE_FIELDS = ("id", "subjectId", "createdAt")


def subject_weeks_prefix(subject_id: str) -> str:
    return f"{WEEK_PREFIX}{subject_id}:"


def week_key(subject_id: str, week_id: str) -> str:
    return f"{subject_weeks_prefix(subject_id)}{week_id}"


def _check_week_number(week_number: Optional[int]) -> None:
    if week_number is not None and week_number < 1:
        raise ValidationError("weekNumber must be a positive integer")


def create_week(store: KVStore, payload: WeekCreate) -> Week:
    if not payload.subject_id or payload.week_number is None or not (payload.title or "").strip():
        raise ValidationError("Missing required fields")
    _check_week_number(payload.week_number)
    week = Week(
        id=generate_id("week"),
        subject_id=payload.subject_id,
        week_number=payload.week_number,
        title=payload.title.strip(),
        description=payload.description,
        published=payload.published,
        video_links=filter_blank_links(payload.video_links),
        audio_links=filter_blank_links(payload.audio_links),
        pdf_links=filter_blank_links(payload.pdf_links),
        questions=payload.questions,
        created_at=utc_now_iso(),
    )
    store.set(week_key(week.subject_id, week.id), week.to_record())
    return week


def find_week(store: KVStore, week_id: str) -> Optional[Dict[str, Any]]:
    """Locate a stored week by id alone.

    The key embeds the subject id, so this scans every week of every subject.
    """
    for record in store.scan_by_prefix(WEEK_PREFIX):
        if record.get("id") == week_id:
            return record
    return None


def _apply_update(store: KVStore, record: Dict[str, Any], changes: Dict[str, Any]) -> Week:
    for field in IMMUTABLE_FIELDS:
        changes.pop(field, None)
    for field in LINK_FIELDS:
        if field in changes:
            changes[field] = filter_blank_links(changes[field])
    week = Week.model_validate({**record, **changes})
    store.set(week_key(record["subjectId"], record["id"]), week.to_record())
    return week


def update_week(store: KVStore, week_id: str, payload: WeekUpdate) -> Week:
    """Shallow merge: every supplied top-level field replaces the stored one."""
    changes = payload.model_dump(by_alias=True, exclude_unset=True, mode="json")
    # null clears description; on the other scalar fields it means "unchanged"
    changes = {key: value for key, value in changes.items() if value is not None or key == "description"}
    if "title" in changes and not changes["title"].strip():
        raise ValidationError("Title cannot be empty")
    _check_week_number(changes.get("weekNumber"))
    record = find_week(store, week_id)
    if not record:
        raise NotFound("Week not found")
    return _apply_update(store, record, changes)


def toggle_publish(store: KVStore, week_id: str) -> Week:
    record = find_week(store, week_id)
    if not record:
        raise NotFound("Week not found")
    return _apply_update(store, record, {"published": not record.get("published", False)})


def delete_week(store: KVStore, week_id: str) -> None:
    record = find_week(store, week_id)
    if not record:
        raise NotFound("Week not found")
    store.delete(week_key(record["subjectId"], week_id))


def list_weeks_for_subject(store: KVStore, subject_id: str) -> List[Week]:
    """All weeks of a subject, published or not, ascending by weekNumber (ties keep scan order)."""
    weeks = [Week.model_validate(record) for record in store.scan_by_prefix(subject_weeks_prefix(subject_id))]
    return sorted(weeks, key=lambda week: week.week_number)


def filter_published(weeks: Iterable[Week]) -> List[Week]:
    """Student visibility: only published weeks."""
    return [week for week in weeks if week.published]
