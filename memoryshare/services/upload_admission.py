"""
Upload admission.

Decides whether one incoming file may be stored against one space and, if so,
stores it: space lookup, quota check, object store upload, media row insert.
Either the media row is committed or the session is rolled back and nothing
counts against the quota.

The space row is read with SELECT ... FOR UPDATE, so two uploads to the same
space cannot both pass the count/size checks against the same stale totals;
the second waits until the first commits or rolls back. SQLite ignores the
lock clause.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memoryshare.core.plan_limits import resolve_quota
from memoryshare.models.media import Media
from memoryshare.models.space import Space
from memoryshare.services.object_store import ObjectStore, ObjectStoreError, StoredObject

logger = logging.getLogger(__name__)

DEFAULT_UPLOADER = "Guest"

NO_FILE = "no-file"
SPACE_NOT_FOUND = "space-not-found"
COUNT_EXCEEDED = "count-exceeded"
STORAGE_EXCEEDED = "storage-exceeded"
STORE_FAILED = "store-failed"
PERSIST_FAILED = "persist-failed"


class UploadRejected(Exception):
    def __init__(self, reason: str, message: str, status_code: int, error: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.status_code = status_code
        self.error = error


@dataclass
class IncomingFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None
    size: Optional[int] = None

    def __post_init__(self):
        if self.size is None:
            self.size = len(self.content)


def space_usage(db: Session, space_id: str):
    """Return (media count, bytes used) for a space, recomputed from the media rows."""
    count, used = db.query(
        func.count(Media.id),
        func.coalesce(func.sum(Media.file_size), 0),
    ).filter(Media.space_id == space_id).one()
    return int(count), int(used)


def _discard_upload(store: ObjectStore, stored: StoredObject) -> None:
    try:
        store.delete(stored.public_id, resource_type=stored.resource_type)
        logger.info("[Upload] Removed orphaned object %s after failed insert", stored.public_id)
    except ObjectStoreError as e:
        logger.error("[Upload] Could not remove orphaned object %s: %s", stored.public_id, e)


def admit_upload(
    db: Session,
    store: ObjectStore,
    space_id: str,
    upload: Optional[IncomingFile],
    uploaded_by: Optional[str] = None,
) -> Media:
    if upload is None:
        raise UploadRejected(NO_FILE, "No file uploaded", 400)

    try:
        space = db.query(Space).filter(Space.id == space_id).with_for_update().first()
        if not space:
            raise UploadRejected(SPACE_NOT_FOUND, "Space not found", 404)

        quota = resolve_quota(space.plan)
        media_count, bytes_used = space_usage(db, space_id)

        if media_count >= quota.max_count:
            raise UploadRejected(
                COUNT_EXCEEDED,
                f"Your plan allows only {quota.max_count} media uploads.",
                403,
            )
        if bytes_used + upload.size > quota.max_bytes:
            raise UploadRejected(
                STORAGE_EXCEEDED,
                "Storage limit exceeded for your plan. Please upgrade to upload more.",
                403,
            )

        try:
            stored = store.upload(upload.content, space_id, filename=upload.filename)
        except ObjectStoreError as e:
            raise UploadRejected(STORE_FAILED, "Failed to upload file", 500, error=str(e))

        media = Media(
            space_id=space_id,
            file_name=upload.filename or stored.original_filename or "file",
            file_url=stored.url,
            file_type=stored.resource_type,
            file_size=upload.size,
            uploaded_by=(uploaded_by or "").strip() or DEFAULT_UPLOADER,
            uploaded_at=datetime.utcnow(),
        )
        try:
            db.add(media)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            _discard_upload(store, stored)
            raise UploadRejected(PERSIST_FAILED, "Failed to save media", 500, error=str(e))

    except UploadRejected as e:
        db.rollback()
        logger.info("[Upload] Rejected upload to space %s: %s", space_id, e.reason)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("[Upload] Database error while admitting upload to space %s", space_id)
        raise UploadRejected(PERSIST_FAILED, "Failed to upload media", 500, error=str(e))

    db.refresh(media)
    logger.info(
        "[Upload] Stored %s (%d bytes) in space %s (%d/%d items)",
        media.file_name, media.file_size, space_id, media_count + 1, quota.max_count,
    )
    return media
