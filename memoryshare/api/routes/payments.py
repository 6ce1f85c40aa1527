"""
Paystack payment routes: transaction initialization, webhook, and
client-side verification after the inline checkout closes.
Both the webhook and the verify endpoint confirm the transaction with
Paystack before anything is written.
"""
import json
import logging

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from memoryshare.db.session import get_db
from memoryshare.dependencies.services import get_payment_processor
from memoryshare.schemas.payment import PaymentInitRequest, VerifyPaymentRequest
from memoryshare.services.billing import PaymentBelowPrice, UserNotFound, mark_paid, transaction_email
from memoryshare.services.paystack import PaystackClient, PaystackError
from memoryshare.utils.errors import api_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/paystack/initialize")
async def initialize_payment(
    body: PaymentInitRequest,
    paystack: PaystackClient = Depends(get_payment_processor),
):
    """Returns Paystack's authorization_url, access_code and reference."""
    try:
        return await paystack.initialize(
            email=body.email,
            amount=body.amount,
            currency=body.currency,
            plan=body.plan,
            payment_method=body.payment_method,
            phone=body.phone,
            provider=body.provider,
        )
    except PaystackError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to initialize payment",
            error=e.payload or e.message,
        )


@router.post("/paystack/webhook")
async def paystack_webhook(
    request: Request,
    db: Session = Depends(get_db),
    paystack: PaystackClient = Depends(get_payment_processor),
):
    """
    Paystack webhook. Register this URL in the Paystack dashboard:
    https://your-backend.com/api/spaces/paystack/webhook
    """
    payload = await request.body()
    if not paystack.verify_signature(payload, request.headers.get("x-paystack-signature")):
        logger.warning("[Paystack webhook] Signature mismatch")
        return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid JSON")
    if not isinstance(event, dict):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid event payload")

    event_type = event.get("event")
    data = event.get("data")
    if not isinstance(data, dict):
        data = {}
    logger.info("[Paystack webhook] event=%s reference=%s", event_type, data.get("reference"))

    if event_type != "charge.success":
        return {"status": "ignored"}

    reference = data.get("reference")
    if not reference:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Missing transaction reference")

    try:
        transaction = await paystack.verify(reference)
    except PaystackError as e:
        logger.error("[Paystack webhook] Verification of %s failed: %s", reference, e.message)
        return PlainTextResponse("Verification failed", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if transaction.get("status") != "success":
        logger.info("[Paystack webhook] Transaction %s not successful: %s", reference, transaction.get("status"))
        return {"status": "success"}

    email = transaction_email(transaction) or transaction_email(data)
    try:
        mark_paid(db, email or "", reference, transaction=transaction)
    except UserNotFound:
        # Acknowledge anyway so Paystack stops retrying; the verify endpoint can still record it.
        logger.warning("[Paystack webhook] No user with email %s for payment %s", email, reference)
    except PaymentBelowPrice:
        logger.warning("[Paystack webhook] Payment %s does not cover its plan; not upgraded", reference)

    return {"status": "success"}


@router.post("/verify-payment")
async def verify_payment(
    body: VerifyPaymentRequest = Body(...),
    db: Session = Depends(get_db),
    paystack: PaystackClient = Depends(get_payment_processor),
):
    if not body.transaction_id or not body.email:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Missing payment details")

    try:
        transaction = await paystack.verify(body.transaction_id)
    except PaystackError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to verify payment",
            error=e.payload or e.message,
        )

    if transaction.get("status") != "success":
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Payment has not succeeded",
            error=transaction.get("gateway_response") or transaction.get("status"),
        )
    paid_email = transaction_email(transaction)
    if not paid_email or paid_email != body.email.lower():
        raise api_error(status.HTTP_400_BAD_REQUEST, "Payment does not belong to this email")

    try:
        mark_paid(db, body.email, body.transaction_id, transaction=transaction)
    except UserNotFound:
        raise api_error(status.HTTP_404_NOT_FOUND, "User not found")
    except PaymentBelowPrice as e:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Payment does not cover the plan price",
            error=f"Plan {e.plan} costs {e.price}, paid {e.amount}",
        )

    return {"success": True, "message": "Payment verified and user updated"}
