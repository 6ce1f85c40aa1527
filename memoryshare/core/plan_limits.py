from typing import Dict, NamedTuple, Optional

MIB = 1024 * 1024
GIB = 1024 * MIB

DEFAULT_PLAN = "basic"

# Plan limits configuration
# Limits are per space: how many media items and how many bytes it may hold.
PLAN_LIMITS: Dict[str, Dict[str, int]] = {
    "basic": {
        "max_media": 10,
        "max_storage_bytes": 50 * MIB,
    },
    "premium": {
        "max_media": 500,
        "max_storage_bytes": 1 * GIB,
    },
    "forever": {
        "max_media": 3000,
        "max_storage_bytes": 5 * GIB,
    },
}


class Quota(NamedTuple):
    max_count: int
    max_bytes: int


def normalize_plan(plan_tier: Optional[str]) -> str:
    """Return a known plan id, falling back to basic for missing or unknown ones."""
    if plan_tier and plan_tier in PLAN_LIMITS:
        return plan_tier
    return DEFAULT_PLAN


def get_plan_limit(plan_tier: Optional[str], limit_type: str) -> int:
    """Get the limit value for a specific plan and limit type."""
    return PLAN_LIMITS[normalize_plan(plan_tier)].get(limit_type, 0)


def resolve_quota(plan_tier: Optional[str]) -> Quota:
    return Quota(
        max_count=get_plan_limit(plan_tier, "max_media"),
        max_bytes=get_plan_limit(plan_tier, "max_storage_bytes"),
    )


# Plan prices in currency subunits (pesewas). A verified charge must cover the
# price of the plan in its metadata before spaces are moved to that plan.
PLAN_CURRENCY = "GHS"
PLAN_PRICES: Dict[str, int] = {
    "basic": 0,
    "premium": 10 * 100,
    "forever": 30 * 100,
}


def get_plan_price(plan_tier: Optional[str]) -> Optional[int]:
    """Price of a plan in subunits, or None for unknown plans."""
    if not plan_tier:
        return None
    return PLAN_PRICES.get(plan_tier)
