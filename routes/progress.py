import logging

from fastapi import APIRouter, Depends

from db.database import get_store
from db.kv_store import StoreError
from models.progress import ProgressCreate, ProgressSummary
from utils.auth import get_current_account_id
from utils.errors import InternalError, ValidationError
from utils.progress import completed_week_count, course_progress_percent, list_progress, record_progress
from utils.weeks import filter_published, list_weeks_for_subject

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/progress")
async def save_progress(
    payload: ProgressCreate,
    account_id: str = Depends(get_current_account_id),
    store=Depends(get_store),
):
    """Upsert the caller's record for one week."""
    if not payload.week_id:
        raise ValidationError("weekId is required")
    try:
        record = record_progress(store, account_id, payload.week_id, payload.completed)
    except StoreError as exc:
        logger.error("Error saving progress: %s", exc)
        raise InternalError("Failed to save progress")
    return {"success": True, "progress": record.to_record()}


@router.get("/progress")
async def get_progress(account_id: str = Depends(get_current_account_id), store=Depends(get_store)):
    """The caller's own progress records only."""
    try:
        records = list_progress(store, account_id)
    except StoreError as exc:
        logger.error("Error getting progress: %s", exc)
        raise InternalError("Failed to get progress")
    return {"progress": [record.to_record() for record in records]}


@router.get("/progress/summary/{subject_id}")
async def progress_summary(
    subject_id: str,
    account_id: str = Depends(get_current_account_id),
    store=Depends(get_store),
):
    try:
        published = filter_published(list_weeks_for_subject(store, subject_id))
        records = list_progress(store, account_id)
    except StoreError as exc:
        logger.error("Error getting progress summary: %s", exc)
        raise InternalError("Failed to get progress")
    summary = ProgressSummary(
        subject_id=subject_id,
        completed=completed_week_count(records, published),
        total=len(published),
        percent=course_progress_percent(records, published),
    )
    return summary.to_record()
