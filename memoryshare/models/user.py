from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from memoryshare.db.base import Base


class User(Base):
    __tablename__ = "users"

    uid = Column(String, primary_key=True, index=True)  # Identity provider subject id
    # Nullable only so an allowed email reassignment can release it from another row.
    email = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=True)
    payment_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
