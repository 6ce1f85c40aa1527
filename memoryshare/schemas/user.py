from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from memoryshare.schemas.space import CamelModel


class UserUpsert(CamelModel):
    uid: str = Field(..., min_length=1)
    email: EmailStr
    display_name: Optional[str] = None


class UserResponse(CamelModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    payment_verified: bool
    created_at: Optional[datetime] = None


class UserExistsResponse(CamelModel):
    exists: bool
