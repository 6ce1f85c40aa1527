"""
Payment bookkeeping.

mark_paid() is the single write path for a verified Paystack charge, used by
both the webhook and the client-side verify endpoint. It is idempotent on the
transaction reference.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memoryshare.core.plan_limits import PLAN_CURRENCY, PLAN_LIMITS, get_plan_price
from memoryshare.models.payment import Payment
from memoryshare.models.space import Space
from memoryshare.models.user import User

logger = logging.getLogger(__name__)


class UserNotFound(Exception):
    pass


class PaymentBelowPrice(Exception):
    def __init__(self, plan: str, amount: int, price: int):
        super().__init__(f"Payment of {amount} does not cover plan {plan} ({price})")
        self.plan = plan
        self.amount = amount
        self.price = price


def _parse_paid_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return None


def transaction_email(transaction: Dict[str, Any]) -> Optional[str]:
    customer = transaction.get("customer") or {}
    email = customer.get("email") or transaction.get("email")
    return email.lower() if email else None


def transaction_plan(transaction: Dict[str, Any]) -> Optional[str]:
    meta = transaction.get("metadata") or {}
    if not isinstance(meta, dict):
        return None
    return meta.get("plan")


def _find_payment(db: Session, reference: str) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.reference == reference).first()


def _amount_subunits(transaction: Dict[str, Any]) -> int:
    try:
        return int(transaction.get("amount") or 0)
    except (TypeError, ValueError):
        return 0


def check_plan_price(transaction: Dict[str, Any]) -> Optional[str]:
    """
    Return the plan a verified charge pays for. Raises PaymentBelowPrice when
    the plan is known but the charge is in another currency or smaller than
    its price.
    """
    plan = transaction_plan(transaction)
    price = get_plan_price(plan)
    if price is None:
        return plan
    amount = _amount_subunits(transaction)
    currency = (transaction.get("currency") or PLAN_CURRENCY).upper()
    if currency != PLAN_CURRENCY or amount < price:
        raise PaymentBelowPrice(plan, amount, price)
    return plan


def mark_paid(
    db: Session,
    email: str,
    reference: str,
    transaction: Optional[Dict[str, Any]] = None,
) -> Payment:
    """
    Record a verified payment: flag the user as paid, move their spaces to the
    plan named in the transaction metadata and store the payment row.

    Raises UserNotFound if no user has this email, and PaymentBelowPrice if
    the charge does not cover that plan. Nothing is written in either case.
    """
    existing = _find_payment(db, reference)
    if existing:
        logger.info("[Billing] Payment %s already recorded", reference)
        return existing

    user = db.query(User).filter(User.email == email.lower()).first()
    if not user:
        raise UserNotFound(email)

    transaction = transaction or {}
    try:
        plan = check_plan_price(transaction)
    except PaymentBelowPrice as e:
        logger.warning(
            "[Billing] Payment %s of %s %s does not cover plan %s (%d)",
            reference, e.amount, transaction.get("currency"), e.plan, e.price,
        )
        raise

    user.payment_verified = True
    if plan in PLAN_LIMITS:
        upgraded = db.query(Space).filter(Space.user_id == user.uid).update(
            {Space.plan: plan}, synchronize_session=False
        )
        logger.info("[Billing] Moved %d space(s) of user %s to plan %s", upgraded, user.uid, plan)
    elif plan:
        logger.warning("[Billing] Unknown plan %r on payment %s; spaces left unchanged", plan, reference)

    amount = transaction.get("amount")
    payment = Payment(
        reference=reference,
        email=email.lower(),
        user_uid=user.uid,
        plan=plan,
        amount=(Decimal(str(amount)) / 100) if amount is not None else None,
        currency=transaction.get("currency"),
        status=transaction.get("status") or "success",
        paid_at=_parse_paid_at(transaction.get("paid_at")) or datetime.utcnow(),
    )
    db.add(payment)
    try:
        db.commit()
    except IntegrityError:
        # Same reference recorded by a concurrent webhook or verify call
        db.rollback()
        existing = _find_payment(db, reference)
        if existing is None:
            raise
        logger.info("[Billing] Payment %s recorded concurrently", reference)
        return existing
    db.refresh(payment)
    return payment
