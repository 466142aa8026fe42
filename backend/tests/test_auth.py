import pytest
from httpx import AsyncClient

from tests.conftest import get_auth_headers, TEST_PASSWORD


@pytest.mark.asyncio
async def test_register_principal(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "New.Principal@School.sy", "password": "secret123"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "new.principal@school.sy"
    assert data["user"]["role"] == "principal"
    assert data["user"]["school_id"] is None


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, principal_user):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "principal@school.sy", "password": "secret123"},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["error"]["code"] == "DUPLICATE"


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "x@school.sy", "password": "123"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_login(client: AsyncClient, principal_user, school):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "principal@school.sy", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == str(principal_user.id)
    assert data["user"]["school_id"] == str(school.id)


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, principal_user):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "principal@school.sy", "password": "wrong-pass"},
    )
    assert response.status_code == 401
    assert response.json()["detail"]["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@school.sy", "password": "secret123"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_restores_session(client: AsyncClient, admin_user):
    response = await client.get("/api/v1/auth/me", headers=get_auth_headers(admin_user))
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, principal_user):
    response = await client.post("/api/v1/auth/logout", headers=get_auth_headers(principal_user))
    assert response.status_code == 200
    assert response.json()["message"] == "تم تسجيل الخروج"
