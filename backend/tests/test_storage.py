import uuid

import pytest

from schoolneeds.core.exceptions import ValidationError
from schoolneeds.services.storage_service import StorageService


@pytest.mark.asyncio
async def test_upload_writes_file_and_returns_public_url(tmp_path):
    storage = StorageService(root=str(tmp_path), public_url="/media/")

    url = await storage.upload("images", "owner/photo.png", b"png-bytes", "image/png")

    assert url == "/media/images/owner/photo.png"
    assert (tmp_path / "images" / "owner" / "photo.png").read_bytes() == b"png-bytes"


@pytest.mark.asyncio
async def test_delete(tmp_path):
    storage = StorageService(root=str(tmp_path))
    await storage.upload("images", "a.jpg", b"x")

    assert await storage.delete("images", "a.jpg") is True
    assert await storage.delete("images", "a.jpg") is False


@pytest.mark.asyncio
async def test_path_traversal_is_rejected(tmp_path):
    storage = StorageService(root=str(tmp_path / "store"))
    with pytest.raises(ValidationError):
        await storage.upload("images", "../../etc/passwd", b"x")


def test_image_path_uses_content_type_extension():
    owner = uuid.uuid4()
    path = StorageService.image_path(owner, "image/png")
    assert path.startswith(f"{owner}/")
    assert path.endswith(".png")


@pytest.mark.parametrize("content_type", ["image/tiff", "image/svg+xml", "image/x-anything", "text/html", ""])
def test_image_path_rejects_other_content_types(content_type):
    with pytest.raises(ValidationError):
        StorageService.image_path(uuid.uuid4(), content_type)
