import pytest
from httpx import AsyncClient

from tests.conftest import get_auth_headers


PAGE_PAYLOAD = {
    "subject": "من نحن",
    "slug": "About-Us",
    "content": "منصة لربط المدارس السورية بالمانحين",
}


@pytest.mark.asyncio
async def test_create_and_read_page(client: AsyncClient, admin_user):
    response = await client.post("/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=get_auth_headers(admin_user))
    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "about-us"
    assert data["published"] is True
    assert data["created_by"] == str(admin_user.id)

    response = await client.get("/api/v1/public/pages/about-us")
    assert response.status_code == 200
    assert response.json()["subject"] == "من نحن"


@pytest.mark.asyncio
async def test_invalid_slug(client: AsyncClient, admin_user):
    response = await client.post(
        "/api/v1/admin/pages",
        json={**PAGE_PAYLOAD, "slug": "about us"},
        headers=get_auth_headers(admin_user),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_slug(client: AsyncClient, admin_user):
    headers = get_auth_headers(admin_user)
    await client.post("/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=headers)

    response = await client.post("/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"]["error"]["details"] == {"slug": "about-us"}


@pytest.mark.asyncio
async def test_unpublished_page_is_not_public(client: AsyncClient, admin_user):
    headers = get_auth_headers(admin_user)
    created = await client.post("/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=headers)
    page_id = created.json()["id"]

    response = await client.patch(f"/api/v1/admin/pages/{page_id}", json={"published": False}, headers=headers)
    assert response.status_code == 200
    assert response.json()["published"] is False

    response = await client.get("/api/v1/public/pages/about-us")
    assert response.status_code == 404

    response = await client.get("/api/v1/admin/pages", headers=headers)
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_rename_slug_and_delete(client: AsyncClient, admin_user):
    headers = get_auth_headers(admin_user)
    created = await client.post("/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=headers)
    page_id = created.json()["id"]

    response = await client.patch(f"/api/v1/admin/pages/{page_id}", json={"slug": "who-we-are"}, headers=headers)
    assert response.json()["slug"] == "who-we-are"

    response = await client.delete(f"/api/v1/admin/pages/{page_id}", headers=headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/public/pages/who-we-are")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_principal_cannot_manage_pages(client: AsyncClient, principal_user):
    response = await client.post(
        "/api/v1/admin/pages", json=PAGE_PAYLOAD, headers=get_auth_headers(principal_user)
    )
    assert response.status_code == 403
