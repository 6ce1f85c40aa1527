import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from memoryshare.db.base import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class Space(Base):
    """One host's event. Guests reach it through its url_slug."""

    __tablename__ = "spaces"

    id = Column(String(32), primary_key=True, default=generate_id)
    url_slug = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)  # Identity provider uid of the owner
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    partner_first_name = Column(String, nullable=False)
    partner_last_name = Column(String, nullable=False)
    event_date = Column(DateTime, nullable=False)
    event_type = Column(String, nullable=True)
    is_public = Column(Boolean, default=True, nullable=False)
    plan = Column(String, default="basic", nullable=False)  # basic | premium | forever
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    media = relationship(
        "Media",
        back_populates="space",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Space(id={self.id}, url_slug={self.url_slug}, plan={self.plan})>"
