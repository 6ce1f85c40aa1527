from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies keep the camelCase keys the web client sends and reads."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SpaceCreate(CamelModel):
    url_slug: Optional[str] = None  # Generated from the couple's initials when omitted
    user_id: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    partner_first_name: str = Field(..., min_length=1)
    partner_last_name: str = Field(..., min_length=1)
    event_date: datetime
    event_type: Optional[str] = None
    is_public: bool = True
    plan: Optional[str] = None


class SpaceResponse(CamelModel):
    id: str
    url_slug: str
    user_id: str
    first_name: str
    last_name: str
    partner_first_name: str
    partner_last_name: str
    event_date: datetime
    event_type: Optional[str] = None
    is_public: bool
    plan: str
    created_at: Optional[datetime] = None


class SpaceModeUpdate(CamelModel):
    is_public: bool


class SlugCheckResponse(CamelModel):
    available: bool
    message: str
    suggested_slug: Optional[str] = None


class UserSpaceIdResponse(CamelModel):
    space_id: str


class SpaceUsageResponse(CamelModel):
    plan: str
    media_count: int
    bytes_used: int
    max_count: int
    max_bytes: int
