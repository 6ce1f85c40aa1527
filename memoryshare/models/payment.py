from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric

from memoryshare.db.base import Base


class Payment(Base):
    """
    One row per verified Paystack transaction.

    The processor reference is unique so a webhook delivery and a client-side
    verification of the same charge are only recorded once.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, index=True)
    user_uid = Column(String, ForeignKey("users.uid", ondelete="SET NULL"), nullable=True)
    plan = Column(String, nullable=True)

    # Major units (150.00 for GHS 150); Paystack amounts are subunits and divided by 100
    amount = Column(Numeric(12, 2), nullable=True)
    currency = Column(String, nullable=True)

    status = Column(String, nullable=False, default="success")
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
