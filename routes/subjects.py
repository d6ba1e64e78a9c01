import logging

from fastapi import APIRouter, Depends

from db.database import get_store
from db.kv_store import StoreError
from models.subject import SubjectCreate
from utils.auth import require_admin
from utils.errors import InternalError
from utils.subjects import create_subject, delete_subject, list_subjects

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/admin/subjects", dependencies=[Depends(require_admin)])
async def add_subject(payload: SubjectCreate, store=Depends(get_store)):
    """Create a subject (admin only)."""
    try:
        subject = create_subject(store, payload.name, payload.description)
    except StoreError as exc:
        logger.error("Error creating subject: %s", exc)
        raise InternalError("Failed to create subject")
    return {"success": True, "subject": subject.to_record()}


@router.get("/subjects")
async def get_subjects(store=Depends(get_store)):
    """All subjects, in no particular order."""
    try:
        subjects = list_subjects(store)
    except StoreError as exc:
        logger.error("Error getting subjects: %s", exc)
        raise InternalError("Failed to get subjects")
    return {"subjects": [subject.to_record() for subject in subjects]}


@router.delete("/admin/subjects/{subject_id}", dependencies=[Depends(require_admin)])
async def remove_subject(subject_id: str, store=Depends(get_store)):
    """Delete a subject and cascade to its weeks."""
    try:
        delete_subject(store, subject_id)
    except StoreError as exc:
        logger.error("Error deleting subject: %s", exc)
        raise InternalError("Failed to delete subject")
    return {"success": True}
