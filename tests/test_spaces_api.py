from memoryshare.services import slugs as slugs_module
from memoryshare.models import Space

SPACE_BODY = {
    "userId": "firebase-uid-1",
    "firstName": "Ama",
    "lastName": "Mensah",
    "partnerFirstName": "Kofi",
    "partnerLastName": "Boateng",
    "eventDate": "2026-06-20T00:00:00",
    "eventType": "wedding",
    "plan": "premium",
}


def _create(client, **overrides):
    return client.post("/api/spaces", json={**SPACE_BODY, **overrides})


def test_create_space(client):
    r = _create(client, urlSlug="ama-and-kofi")

    assert r.status_code == 201
    body = r.json()
    assert body["urlSlug"] == "ama-and-kofi"
    assert body["userId"] == "firebase-uid-1"
    assert body["plan"] == "premium"
    assert body["isPublic"] is True
    assert body["id"]


def test_create_space_generates_slug_from_initials(client):
    r = _create(client)
    assert r.status_code == 201
    assert r.json()["urlSlug"] == "ak2026"


def test_create_space_unknown_plan_falls_back_to_basic(client):
    r = _create(client, urlSlug="ak-gold", plan="gold")
    assert r.json()["plan"] == "basic"


def test_duplicate_slug_gets_suffix_and_never_collides(client):
    first = _create(client, urlSlug="ak2026").json()
    second = _create(client, urlSlug="ak2026").json()
    third = _create(client, urlSlug="ak2026").json()

    assert first["urlSlug"] == "ak2026"
    assert second["urlSlug"] == "ak2026-2"
    assert third["urlSlug"] == "ak2026-3"
    assert len({first["id"], second["id"], third["id"]}) == 3


def test_slug_race_surfaces_slug_taken_with_suggestion(client, monkeypatch):
    from memoryshare.api.routes import spaces as spaces_routes

    _create(client, urlSlug="ak2026")
    real_resolve = slugs_module.resolve_unique_slug
    calls = []

    def stale_resolve(db, requested):
        calls.append(requested)
        # First call behaves as if another request had not committed yet
        if len(calls) == 1:
            return slugs_module.normalize_slug(requested)
        return real_resolve(db, requested)

    monkeypatch.setattr(spaces_routes, "resolve_unique_slug", stale_resolve)

    r = _create(client, urlSlug="ak2026")

    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "URL slug is already taken"
    assert body["suggestedSlug"] == "ak2026-2"
    assert "error" in body


def test_create_space_missing_fields_is_400(client):
    r = client.post("/api/spaces", json={"userId": "x"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid request"


def test_check_slug(client, make_space):
    make_space(url_slug="ak2026")

    free = client.get("/api/spaces/check-slug/ak2027").json()
    taken = client.get("/api/spaces/check-slug/ak2026").json()

    assert free == {"available": True, "message": "URL is available"}
    assert taken["available"] is False
    assert taken["suggestedSlug"] == "ak2026-2"


def test_check_slug_with_invalid_characters(client):
    body = client.get("/api/spaces/check-slug/Ama Kofi!").json()
    assert body["available"] is False
    assert body["suggestedSlug"] == "ama-kofi"


def test_get_space_by_slug_and_id(client, make_space):
    space = make_space(url_slug="ak2026")

    by_slug = client.get("/api/spaces/ak2026")
    by_id = client.get(f"/api/spaces/id/{space.id}")

    assert by_slug.status_code == 200
    assert by_slug.json()["id"] == space.id
    assert by_id.json()["urlSlug"] == "ak2026"


def test_missing_space_is_404(client):
    assert client.get("/api/spaces/nobody").status_code == 404
    r = client.get("/api/spaces/id/deadbeef")
    assert r.status_code == 404
    assert r.json() == {"message": "Space not found"}


def test_get_user_space_id(client, make_space):
    space = make_space(user_id="firebase-uid-9")

    r = client.get("/api/spaces/user/firebase-uid-9/spaceId")
    assert r.json() == {"spaceId": space.id}

    missing = client.get("/api/spaces/user/unknown/spaceId")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Space not found for this user"


def test_update_mode_is_idempotent(client, make_space, db):
    space = make_space(is_public=True)

    first = client.patch(f"/api/spaces/{space.id}/mode", json={"isPublic": False})
    second = client.patch(f"/api/spaces/{space.id}/mode", json={"isPublic": False})

    assert first.status_code == second.status_code == 200
    assert first.json()["isPublic"] is False
    assert second.json() == first.json()
    db.expire_all()
    assert db.query(Space).filter(Space.id == space.id).one().is_public is False


def test_update_mode_requires_flag_and_space(client, make_space):
    space = make_space()
    assert client.patch(f"/api/spaces/{space.id}/mode", json={}).status_code == 400
    assert client.patch("/api/spaces/deadbeef/mode", json={"isPublic": True}).status_code == 404


def test_space_usage(client, make_space, add_media):
    space = make_space(plan="basic")
    add_media(space, file_size=1000)
    add_media(space, file_size=500)

    body = client.get(f"/api/spaces/{space.id}/usage").json()

    assert body == {
        "plan": "basic",
        "mediaCount": 2,
        "bytesUsed": 1500,
        "maxCount": 10,
        "maxBytes": 50 * 1024 * 1024,
    }
