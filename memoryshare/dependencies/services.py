"""
FastAPI dependencies for the external collaborators.

Routes never build Cloudinary or Paystack clients themselves; tests swap these
out with app.dependency_overrides.
"""
from fastapi import Depends

from memoryshare.core.config import Settings, get_settings
from memoryshare.services.object_store import CloudinaryStore, ObjectStore
from memoryshare.services.paystack import PaystackClient
from memoryshare.utils.errors import api_error


def _missing_config_error(service: str, missing):
    return api_error(
        503,
        f"{service} not configured",
        error="Missing: " + " ".join(missing),
    )


def get_object_store(settings: Settings = Depends(get_settings)) -> ObjectStore:
    missing = settings.missing_cloudinary_keys()
    if missing:
        raise _missing_config_error("File storage", missing)
    return CloudinaryStore(settings)


def get_payment_processor(settings: Settings = Depends(get_settings)) -> PaystackClient:
    missing = settings.missing_paystack_keys()
    if missing:
        raise _missing_config_error("Payment system", missing)
    return PaystackClient(settings)
