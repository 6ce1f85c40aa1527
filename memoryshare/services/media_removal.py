import logging
from typing import Iterable, List, Tuple

from sqlalchemy.orm import Session

from memoryshare.models.media import Media
from memoryshare.services.object_store import ObjectStore, ObjectStoreError

logger = logging.getLogger(__name__)


def _remove_artifact(store: ObjectStore, media: Media) -> None:
    public_id = store.public_id_from_url(media.file_url, media.space_id)
    if not public_id:
        logger.warning("[Media] No public id in %s; skipping object store delete", media.file_url)
        return
    try:
        store.delete(public_id, resource_type=media.file_type)
    except ObjectStoreError as e:
        # Metadata row is deleted regardless.
        logger.warning("[Media] Object store delete failed for %s: %s", public_id, e)


def remove_media(db: Session, store: ObjectStore, space_id: str, media_id: str) -> bool:
    """Delete one media item of a space. Returns False when it does not exist."""
    media = db.query(Media).filter(Media.id == media_id, Media.space_id == space_id).first()
    if not media:
        return False
    _remove_artifact(store, media)
    db.delete(media)
    db.commit()
    return True


def remove_media_batch(
    db: Session, store: ObjectStore, space_id: str, media_ids: Iterable[str]
) -> Tuple[List[str], List[str]]:
    wanted = list(dict.fromkeys(media_ids))
    rows = db.query(Media).filter(Media.space_id == space_id, Media.id.in_(wanted)).all()
    found = {m.id: m for m in rows}

    deleted = []
    for media_id in wanted:
        media = found.get(media_id)
        if media is None:
            continue
        _remove_artifact(store, media)
        db.delete(media)
        deleted.append(media_id)
    db.commit()

    not_found = [media_id for media_id in wanted if media_id not in found]
    return deleted, not_found
