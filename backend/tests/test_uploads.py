import pytest
from httpx import AsyncClient

from schoolneeds.api.v1.uploads import get_storage
from schoolneeds.config import settings
from schoolneeds.main import app
from schoolneeds.services.storage_service import StorageService
from tests.conftest import get_auth_headers


@pytest.fixture
def storage(tmp_path):
    service = StorageService(root=str(tmp_path), public_url="/storage")
    app.dependency_overrides[get_storage] = lambda: service
    yield service
    app.dependency_overrides.pop(get_storage, None)


@pytest.mark.asyncio
async def test_upload_image(client: AsyncClient, principal_user, storage, tmp_path):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("photo.png", b"\x89PNG fake image", "image/png")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["path"].startswith(f"{principal_user.id}/")
    assert data["url"] == f"/storage/{settings.STORAGE_BUCKET}/{data['path']}"
    assert (tmp_path / settings.STORAGE_BUCKET / data["path"]).read_bytes() == b"\x89PNG fake image"


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client: AsyncClient, principal_user, storage):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 422
    assert response.json()["detail"]["error"]["details"] == {"field": "file"}


@pytest.mark.asyncio
async def test_upload_rejects_empty_file(client: AsyncClient, principal_user, storage):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("empty.png", b"", "image/png")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upload_requires_login(client: AsyncClient, storage):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("photo.png", b"data", "image/png")},
    )
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
@pytest.mark.parametrize("filename,content_type", [
    ("evil.html", "image/x-anything"),
    ("logo.svg", "image/svg+xml"),
    ("scan.tiff", "image/tiff"),
])
async def test_upload_rejects_unlisted_image_types(
    client: AsyncClient, principal_user, storage, tmp_path, filename, content_type
):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": (filename, b"<script>alert(1)</script>", content_type)},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 422
    assert response.json()["detail"]["error"]["details"] == {"field": "file"}
    assert list(tmp_path.rglob("*.*")) == []


@pytest.mark.asyncio
async def test_upload_extension_ignores_client_filename(client: AsyncClient, principal_user, storage):
    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("page.html", b"\xff\xd8 jpeg", "image/jpeg")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 201
    assert response.json()["path"].endswith(".jpg")


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client: AsyncClient, principal_user, storage, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 8)

    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("big.png", b"0123456789", "image/png")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 422
    assert list(tmp_path.rglob("*.png")) == []

    response = await client.post(
        "/api/v1/uploads/images",
        files={"file": ("fits.png", b"01234567", "image/png")},
        headers=get_auth_headers(principal_user),
    )
    assert response.status_code == 201
