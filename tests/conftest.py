"""
Pytest fixtures for MemoryShare tests.

Every test gets its own in-memory SQLite database. The object store and the
payment processor are replaced through app.dependency_overrides, so nothing
here talks to Cloudinary or Paystack.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memoryshare.db.base import Base
from memoryshare.db.session import get_db
from memoryshare.dependencies.services import get_object_store
from memoryshare.main import app
from memoryshare.models import Media, Space, User
from memoryshare.services.object_store import ObjectStore, ObjectStoreError, StoredObject


class FakeObjectStore(ObjectStore):
    """In-memory stand-in that produces Cloudinary-shaped URLs."""

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, content, space_id, filename=None):
        if self.fail_upload:
            raise ObjectStoreError("upload refused")
        public_id = f"{self.folder_for(space_id)}/{uuid4().hex[:12]}"
        ext = Path(filename).suffix if filename else ""
        self.objects[public_id] = content
        return StoredObject(
            url=f"https://res.cloudinary.com/demo/image/upload/v1712/{public_id}{ext or '.jpg'}",
            public_id=public_id,
            resource_type="image",
            original_filename=filename,
            size=len(content),
        )

    def delete(self, public_id, resource_type="image"):
        if self.fail_delete:
            raise ObjectStoreError("destroy refused")
        self.deleted.append(public_id)
        self.objects.pop(public_id, None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def client(session_factory, store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_space(db):
    def _make(plan="basic", url_slug=None, user_id="owner-1", is_public=True):
        space = Space(
            url_slug=url_slug or f"space-{uuid4().hex[:8]}",
            user_id=user_id,
            first_name="Ama",
            last_name="Mensah",
            partner_first_name="Kofi",
            partner_last_name="Boateng",
            event_date=datetime(2026, 6, 20),
            event_type="wedding",
            is_public=is_public,
            plan=plan,
        )
        db.add(space)
        db.commit()
        db.refresh(space)
        return space

    return _make


@pytest.fixture
def add_media(db):
    def _add(space, file_size=1024, uploaded_at=None, file_name="photo.jpg"):
        media = Media(
            space_id=space.id,
            file_name=file_name,
            file_url=f"https://res.cloudinary.com/demo/image/upload/v1712/memoryshare/{space.id}/{uuid4().hex[:12]}.jpg",
            file_type="image",
            file_size=file_size,
            uploaded_by="Guest",
            uploaded_at=uploaded_at or datetime.utcnow(),
        )
        db.add(media)
        db.commit()
        db.refresh(media)
        return media

    return _add


@pytest.fixture
def make_user(db):
    def _make(uid="firebase-uid-1", email="host@example.com", display_name="Ama Mensah"):
        user = User(uid=uid, email=email, display_name=display_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make
