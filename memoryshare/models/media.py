from datetime import datetime

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from memoryshare.db.base import Base
from memoryshare.models.space import generate_id


class Media(Base):
    __tablename__ = "media"

    id = Column(String(32), primary_key=True, default=generate_id)
    space_id = Column(String(32), ForeignKey("spaces.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=False)  # Object store resource type: image, video or raw
    file_size = Column(BigInteger, nullable=False, default=0)  # Bytes, summed for the storage quota
    uploaded_by = Column(String, nullable=False, default="Guest")
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    space = relationship("Space", back_populates="media")

    def __repr__(self):
        return f"<Media(id={self.id}, space_id={self.space_id}, file_size={self.file_size})>"
