import cloudinary.exceptions
import pytest

from memoryshare.core.config import Settings
from memoryshare.services import object_store
from memoryshare.services.object_store import CloudinaryStore, ObjectStoreError

SETTINGS = Settings(
    cloudinary_cloud_name="demo",
    cloudinary_api_key="key",
    cloudinary_api_secret="secret",
)


def test_public_id_from_url():
    store = CloudinaryStore(SETTINGS)
    url = "https://res.cloudinary.com/demo/video/upload/v1712/memoryshare/abc123/clip_x9.mp4"

    assert store.public_id_from_url(url, "abc123") == "memoryshare/abc123/clip_x9"
    assert store.public_id_from_url("https://example.com/other.jpg", "abc123") is None


def test_upload_passes_folder_and_credentials(monkeypatch):
    calls = {}

    def fake_upload(file, **options):
        calls.update(options)
        return {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/memoryshare/s1/p1.jpg",
            "public_id": "memoryshare/s1/p1",
            "resource_type": "image",
            "original_filename": "p1",
            "bytes": 3,
        }

    monkeypatch.setattr(object_store.cloudinary.uploader, "upload", fake_upload)

    stored = CloudinaryStore(SETTINGS).upload(b"abc", "s1", filename="p1.jpg")

    assert stored.public_id == "memoryshare/s1/p1"
    assert stored.resource_type == "image"
    assert calls["folder"] == "memoryshare/s1"
    assert calls["resource_type"] == "auto"
    assert calls["cloud_name"] == "demo"
    assert calls["api_secret"] == "secret"


def test_upload_error_is_wrapped(monkeypatch):
    def fake_upload(file, **options):
        raise cloudinary.exceptions.Error("Invalid API key")

    monkeypatch.setattr(object_store.cloudinary.uploader, "upload", fake_upload)

    with pytest.raises(ObjectStoreError, match="Invalid API key"):
        CloudinaryStore(SETTINGS).upload(b"abc", "s1")


@pytest.mark.parametrize("outcome", ["ok", "not found"])
def test_delete_accepts_ok_and_not_found(monkeypatch, outcome):
    monkeypatch.setattr(object_store.cloudinary.uploader, "destroy", lambda public_id, **options: {"result": outcome})
    CloudinaryStore(SETTINGS).delete("memoryshare/s1/p1")


def test_delete_unexpected_result_raises(monkeypatch):
    monkeypatch.setattr(object_store.cloudinary.uploader, "destroy", lambda public_id, **options: {"result": "error"})
    with pytest.raises(ObjectStoreError):
        CloudinaryStore(SETTINGS).delete("memoryshare/s1/p1")
