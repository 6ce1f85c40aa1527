from datetime import datetime

from memoryshare.services import slugs
from memoryshare.services.slugs import generate_slug, normalize_slug, resolve_unique_slug


def test_normalize_slug():
    assert normalize_slug("  Ama & Kofi 2026 ") == "ama-kofi-2026"
    assert normalize_slug("ak--2026") == "ak-2026"
    assert normalize_slug("!!!") == ""


def test_generate_slug_uses_initials_and_event_year():
    assert generate_slug("Ama", "Kofi", datetime(2027, 3, 1)) == "ak2027"


def test_resolve_unique_slug_free(db):
    assert resolve_unique_slug(db, "ak2026") == "ak2026"


def test_resolve_unique_slug_numeric_suffix(db, make_space):
    make_space(url_slug="ak2026")
    make_space(url_slug="ak2026-2")

    assert resolve_unique_slug(db, "ak2026") == "ak2026-3"


def test_resolve_unique_slug_timestamp_fallback(db, make_space, monkeypatch):
    make_space(url_slug="ak2026")
    monkeypatch.setattr(slugs, "MAX_NUMERIC_SUFFIX", 3)
    make_space(url_slug="ak2026-2")
    make_space(url_slug="ak2026-3")
    monkeypatch.setattr(slugs.time, "time", lambda: 1760868000.5)

    assert resolve_unique_slug(db, "ak2026") == "ak2026-1760868000500"


def test_resolve_unique_slug_empty_starts_from_space(db, make_space):
    assert resolve_unique_slug(db, "---") == "space"

    make_space(url_slug="space")

    assert resolve_unique_slug(db, "!!!") == "space-2"
