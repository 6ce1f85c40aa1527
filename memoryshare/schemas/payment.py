from typing import Optional

from pydantic import EmailStr, Field

from memoryshare.schemas.space import CamelModel


class PaymentInitRequest(CamelModel):
    email: EmailStr
    amount: int = Field(..., gt=0)  # Subunits (pesewas, kobo), sent to Paystack as-is
    currency: str = "GHS"
    plan: Optional[str] = None
    payment_method: Optional[str] = None  # "card" or "mobile"
    phone: Optional[str] = None
    provider: Optional[str] = None  # Mobile money provider, e.g. mtn


class VerifyPaymentRequest(CamelModel):
    email: Optional[str] = None
    transaction_id: Optional[str] = None
