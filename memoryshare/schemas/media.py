from datetime import datetime
from typing import List

from pydantic import Field

from memoryshare.schemas.space import CamelModel


class MediaResponse(CamelModel):
    id: str
    space_id: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    uploaded_by: str
    uploaded_at: datetime


class BulkDeleteRequest(CamelModel):
    media_ids: List[str] = Field(..., min_length=1)


class BulkDeleteResponse(CamelModel):
    deleted: List[str]
    not_found: List[str]
