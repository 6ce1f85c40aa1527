import re
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from memoryshare.models.space import Space

# Numeric suffixes tried before falling back to a timestamp suffix
MAX_NUMERIC_SUFFIX = 99


def normalize_slug(value: str) -> str:
    slug = re.sub(r"[^a-z0-9-]+", "-", (value or "").strip().lower())
    return re.sub(r"-{2,}", "-", slug).strip("-")


def generate_slug(first_name: str, partner_first_name: str, event_date: Optional[datetime] = None) -> str:
    """Couple's initials plus the event year, e.g. Ama & Kofi in 2026 -> ak2026."""
    year = (event_date or datetime.utcnow()).year
    initials = (first_name or "").strip()[:1] + (partner_first_name or "").strip()[:1]
    return normalize_slug(f"{initials}{year}") or str(year)


def slug_taken(db: Session, slug: str) -> bool:
    return db.query(Space.id).filter(Space.url_slug == slug).first() is not None


def resolve_unique_slug(db: Session, requested: str) -> str:
    """
    Return the requested slug if free, otherwise the first free slug-2 ..
    slug-99, otherwise slug-<epoch millis>. Slugs that normalize to nothing
    start from "space".
    """
    base = normalize_slug(requested) or "space"
    if not slug_taken(db, base):
        return base
    for n in range(2, MAX_NUMERIC_SUFFIX + 1):
        candidate = f"{base}-{n}"
        if not slug_taken(db, candidate):
            return candidate
    return f"{base}-{int(time.time() * 1000)}"
