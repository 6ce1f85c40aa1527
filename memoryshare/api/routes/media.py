"""
Media routes for a space: guest upload, gallery listing, owner deletes.
Uploads arrive as multipart (file + uploadedBy) and go through admit_upload(),
which runs in the threadpool since it blocks on the object store and the
space row lock. The delete routes are sync for the same reason.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from memoryshare.db.session import get_db
from memoryshare.dependencies.services import get_object_store
from memoryshare.models.media import Media
from memoryshare.models.space import Space
from memoryshare.schemas.media import BulkDeleteRequest, BulkDeleteResponse, MediaResponse
from memoryshare.services.media_removal import remove_media, remove_media_batch
from memoryshare.services.object_store import ObjectStore
from memoryshare.services.upload_admission import IncomingFile, UploadRejected, admit_upload
from memoryshare.utils.errors import api_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{space_id}/media", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    space_id: str,
    file: Optional[UploadFile] = File(None),
    uploaded_by: Optional[str] = Form(None, alias="uploadedBy"),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Admit one guest upload against the space's plan quota."""
    incoming = None
    if file is not None:
        content = await file.read()
        incoming = IncomingFile(
            filename=file.filename or "file",
            content=content,
            content_type=file.content_type,
            size=len(content),
        )

    try:
        return await run_in_threadpool(admit_upload, db, store, space_id, incoming, uploaded_by=uploaded_by)
    except UploadRejected as e:
        raise api_error(e.status_code, e.message, error=e.error, reason=e.reason)


@router.get("/{space_id}/media", response_model=List[MediaResponse])
async def list_space_media(space_id: str, db: Session = Depends(get_db)):
    """All media of a space, newest first."""
    if not db.query(Space.id).filter(Space.id == space_id).first():
        raise api_error(status.HTTP_404_NOT_FOUND, "Space not found")
    return (
        db.query(Media)
        .filter(Media.space_id == space_id)
        .order_by(Media.uploaded_at.desc(), Media.id.desc())
        .all()
    )


@router.delete("/{space_id}/media/{media_id}")
def delete_media(
    space_id: str,
    media_id: str,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    if not remove_media(db, store, space_id, media_id):
        raise api_error(status.HTTP_404_NOT_FOUND, "Media not found")
    logger.info("[Media] Deleted %s from space %s", media_id, space_id)
    return {"message": "Media deleted successfully"}


@router.delete("/{space_id}/media", response_model=BulkDeleteResponse)
def delete_media_batch(
    space_id: str,
    body: BulkDeleteRequest,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    if not db.query(Space.id).filter(Space.id == space_id).first():
        raise api_error(status.HTTP_404_NOT_FOUND, "Space not found")
    deleted, not_found = remove_media_batch(db, store, space_id, body.media_ids)
    logger.info("[Media] Bulk delete in space %s: %d deleted, %d not found", space_id, len(deleted), len(not_found))
    return BulkDeleteResponse(deleted=deleted, not_found=not_found)
