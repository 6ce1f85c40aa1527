"""
Object storage for uploaded media.

Production uses Cloudinary. Credentials come from Settings and are passed on
every call instead of through cloudinary's global config, so one process can be
pointed at different accounts (and tests never touch the SDK).
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from memoryshare.core.config import Settings

logger = logging.getLogger(__name__)


class ObjectStoreError(Exception):
    """Upload or delete against the object store failed."""


@dataclass
class StoredObject:
    url: str
    public_id: str
    resource_type: str
    original_filename: Optional[str] = None
    size: Optional[int] = None


class ObjectStore:
    """Narrow interface the upload and delete paths depend on."""

    root_folder = "memoryshare"

    def folder_for(self, space_id: str) -> str:
        return f"{self.root_folder}/{space_id}"

    def upload(self, content: bytes, space_id: str, filename: Optional[str] = None) -> StoredObject:
        raise NotImplementedError

    def delete(self, public_id: str, resource_type: str = "image") -> None:
        raise NotImplementedError

    def public_id_from_url(self, url: str, space_id: str) -> Optional[str]:
        """
        Recover the public id from a delivery URL, e.g.
        https://res.cloudinary.com/demo/image/upload/v1712/memoryshare/<space>/abc123.jpg
        -> memoryshare/<space>/abc123
        """
        pattern = re.escape(self.root_folder) + r"/[^/]+/([^.]+)"
        match = re.search(pattern, url or "")
        if not match:
            return None
        return f"{self.folder_for(space_id)}/{match.group(1)}"


class CloudinaryStore(ObjectStore):
    def __init__(self, settings: Settings):
        self.root_folder = settings.cloudinary_root_folder
        self._credentials = {
            "cloud_name": settings.cloudinary_cloud_name,
            "api_key": settings.cloudinary_api_key,
            "api_secret": settings.cloudinary_api_secret,
        }

    def upload(self, content: bytes, space_id: str, filename: Optional[str] = None) -> StoredObject:
        try:
            result = cloudinary.uploader.upload(
                content,
                folder=self.folder_for(space_id),
                resource_type="auto",
                filename=filename,
                secure=True,
                **self._credentials,
            )
        except cloudinary.exceptions.Error as e:
            logger.error("[Cloudinary] Upload to %s failed: %s", self.folder_for(space_id), e)
            raise ObjectStoreError(str(e)) from e

        return StoredObject(
            url=result["secure_url"],
            public_id=result["public_id"],
            resource_type=result.get("resource_type", "image"),
            original_filename=result.get("original_filename"),
            size=result.get("bytes"),
        )

    def delete(self, public_id: str, resource_type: str = "image") -> None:
        try:
            result = cloudinary.uploader.destroy(
                public_id,
                resource_type=resource_type,
                invalidate=True,
                **self._credentials,
            )
        except cloudinary.exceptions.Error as e:
            raise ObjectStoreError(str(e)) from e

        outcome = (result or {}).get("result")
        # "not found" means the artifact is already gone, which is what we want.
        if outcome not in ("ok", "not found"):
            raise ObjectStoreError(f"Cloudinary destroy returned {outcome!r} for {public_id}")
