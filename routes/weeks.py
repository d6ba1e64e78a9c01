import logging

from fastapi import APIRouter, Depends

from db.database import get_store
from db.kv_store import StoreError
from models.account import Role
from models.progress import QuizSubmission
from models.week import Week, WeekCreate, WeekUpdate
from utils.auth import get_current_account_id, require_admin
from utils.errors import InternalError, NotFound
from utils.links import content_counts
from utils.profiles import profile_key
from utils.progress import record_progress
from utils.quiz import score_quiz
from utils.weeks import (
    create_week,
    delete_week,
    filter_published,
    find_week,
    list_weeks_for_subject,
    toggle_publish,
    update_week,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/admin/weeks", dependencies=[Depends(require_admin)])
async def add_week(payload: WeekCreate, store=Depends(get_store)):
    """Create a week; blank link rows are dropped before storage."""
    try:
        week = create_week(store, payload)
    except StoreError as exc:
        logger.error("Error creating week: %s", exc)
        raise InternalError("Failed to create week")
    return {"success": True, "week": week.to_record()}


@router.put("/admin/weeks/{week_id}", dependencies=[Depends(require_admin)])
async def edit_week(week_id: str, payload: WeekUpdate, store=Depends(get_store)):
    """Merge the supplied fields over the stored week."""
    try:
        week = update_week(store, week_id, payload)
    except StoreError as exc:
        logger.error("Error updating week: %s", exc)
        raise InternalError("Failed to update week")
    return {"success": True, "week": week.to_record()}


@router.post("/admin/weeks/{week_id}/toggle-publish", dependencies=[Depends(require_admin)])
async def flip_publish(week_id: str, store=Depends(get_store)):
    try:
        week = toggle_publish(store, week_id)
    except StoreError as exc:
        logger.error("Error toggling publish on week: %s", exc)
        raise InternalError("Failed to update week")
    return {"success": True, "week": week.to_record()}


@router.delete("/admin/weeks/{week_id}", dependencies=[Depends(require_admin)])
async def remove_week(week_id: str, store=Depends(get_store)):
    try:
        delete_week(store, week_id)
    except StoreError as exc:
        logger.error("Error deleting week: %s", exc)
        raise InternalError("Failed to delete week")
    return {"success": True}


@router.get("/weeks/{subject_id}")
async def subject_weeks(subject_id: str, store=Depends(get_store)):
    """Every week of the subject, sorted by weekNumber and NOT filtered by published.

    `counts` maps each week id to its non-blank content totals for the admin list.
    """
    try:
        weeks = list_weeks_for_subject(store, subject_id)
    except StoreError as exc:
        logger.error("Error getting weeks: %s", exc)
        raise InternalError("Failed to get weeks")
    records = [week.to_record() for week in weeks]
    return {"weeks": records, "counts": {record["id"]: content_counts(record) for record in records}}


@router.get("/student/weeks/{subject_id}", dependencies=[Depends(get_current_account_id)])
async def published_subject_weeks(subject_id: str, store=Depends(get_store)):
    """Student view of a subject: published weeks only."""
    try:
        weeks = filter_published(list_weeks_for_subject(store, subject_id))
    except StoreError as exc:
        logger.error("Error getting weeks: %s", exc)
        raise InternalError("Failed to get weeks")
    return {"weeks": [week.to_record() for week in weeks]}


@router.post("/weeks/{week_id}/quiz")
async def submit_quiz(
    week_id: str,
    payload: QuizSubmission,
    account_id: str = Depends(get_current_account_id),
    store=Depends(get_store),
):
    """Score a quiz attempt and mark the week completed for a student caller.

    Admins may preview unpublished quizzes; their attempts are scored but
    leave no progress record.
    """
    try:
        record = find_week(store, week_id)
        caller = store.get(profile_key(account_id)) or {}
        is_admin = caller.get("role") == Role.ADMIN.value
        if not record or (not record.get("published") and not is_admin):
            raise NotFound("Week not found")
        week = Week.model_validate(record)
        result = score_quiz(week.questions, payload.answers)
        progress = None if is_admin else record_progress(store, account_id, week.id, True)
    except StoreError as exc:
        logger.error("Error submitting quiz: %s", exc)
        raise InternalError("Failed to submit quiz")
    return {
        "success": True,
        "result": result.to_record(),
        "progress": progress.to_record() if progress else None,
    }
