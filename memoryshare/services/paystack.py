"""
Paystack integration.

Handles transaction initialization, server-side verification, and webhook
signature checks. The secret key is both the API bearer token and the HMAC key
Paystack signs webhooks with.
"""
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from memoryshare.core.config import Settings

logger = logging.getLogger(__name__)


class PaystackError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class PaystackClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 15.0,
    ):
        self.secret_key = settings.paystack_secret_key
        self.base_url = settings.paystack_base_url
        self._transport = transport
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.request(method, url, json=json, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error("[Paystack] Timeout calling %s: %s", path, e)
            raise PaystackError("Paystack API timeout") from e
        except httpx.RequestError as e:
            logger.error("[Paystack] Request error calling %s: %s", path, e)
            raise PaystackError(f"Paystack request failed: {e}") from e

        try:
            body = r.json()
        except ValueError:
            body = {"message": r.text}

        if r.status_code != 200 or not body.get("status"):
            logger.warning("[Paystack] %s %s -> %s: %s", method, path, r.status_code, str(body)[:500])
            raise PaystackError(
                body.get("message") or f"Paystack returned {r.status_code}",
                status_code=r.status_code,
                payload=body,
            )
        return body.get("data") or {}

    async def initialize(
        self,
        email: str,
        amount: int,
        currency: str,
        plan: Optional[str] = None,
        payment_method: Optional[str] = None,
        phone: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Start a transaction. amount is already in the currency subunit
        (pesewas, kobo). Returns authorization_url, access_code and reference.
        """
        payload: Dict[str, Any] = {
            "email": email,
            "amount": amount,
            "currency": currency,
            "metadata": {
                "plan": plan,
                "paymentMethod": payment_method,
                "phone": phone,
                "provider": provider,
            },
        }
        if payment_method == "mobile":
            payload["mobile_money"] = {"phone": phone, "provider": provider}
            payload["channels"] = ["mobile_money"]

        logger.info("[Paystack] Initializing %s %s transaction for %s", currency, plan or "-", email)
        return await self._request("POST", "/transaction/initialize", json=payload)

    async def verify(self, reference: str) -> Dict[str, Any]:
        return await self._request("GET", f"/transaction/verify/{reference}")

    def verify_signature(self, payload: bytes, signature_header: Optional[str]) -> bool:
        """
        Paystack signs the raw request body with HMAC-SHA512 using the secret
        key and sends the hex digest in the x-paystack-signature header.
        """
        if not self.secret_key or not signature_header:
            return False
        expected = hmac.new(self.secret_key.encode(), payload, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature_header.strip())
