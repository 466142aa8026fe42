import uuid

import pytest
from httpx import AsyncClient

from schoolneeds.core.constants import NotificationType
from schoolneeds.services.notification_service import NotificationService, render_message
from schoolneeds.services.realtime import hub, publish_committed
from tests.conftest import get_auth_headers


async def notify(db_session, user, count=1, type=NotificationType.NEED_FULFILLED):
    service = NotificationService(db_session)
    created = [await service.create(user, type, f"Need {i}", "need", uuid.uuid4()) for i in range(count)]
    await db_session.commit()
    await publish_committed(db_session)
    return created


def test_render_message_languages():
    title, message = render_message(NotificationType.SCHOOL_APPROVED, "Al Amal", "en")
    assert title == "School approved"
    assert "Al Amal" in message

    title, _ = render_message(NotificationType.SCHOOL_APPROVED, "Al Amal", "ar")
    assert title == "تمت الموافقة على المدرسة"

    title, _ = render_message(NotificationType.SCHOOL_APPROVED, "Al Amal", "fr")
    assert title == "School approved"


@pytest.mark.asyncio
async def test_notification_uses_recipient_language(db_session, other_principal):
    created = await notify(db_session, other_principal, type=NotificationType.SCHOOL_REJECTED)
    assert created[0].title == "School rejected"


@pytest.mark.asyncio
async def test_list_is_paginated_from_zero(client: AsyncClient, db_session, principal_user):
    await notify(db_session, principal_user, count=12)
    headers = get_auth_headers(principal_user)

    first = (await client.get("/api/v1/notifications", headers=headers)).json()
    assert first["page"] == 0
    assert first["total"] == 12
    assert first["unread"] == 12
    assert len(first["items"]) == 10
    assert first["has_more"] is True

    second = (await client.get("/api/v1/notifications", params={"page": 1}, headers=headers)).json()
    assert len(second["items"]) == 2
    assert second["has_more"] is False

    response = await client.get("/api/v1/notifications", params={"page": -1}, headers=headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_only_own_notifications_are_visible(client: AsyncClient, db_session, principal_user, admin_user):
    await notify(db_session, principal_user)

    response = await client.get("/api/v1/notifications", headers=get_auth_headers(admin_user))
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_mark_read(client: AsyncClient, db_session, principal_user):
    (notification,) = await notify(db_session, principal_user)
    headers = get_auth_headers(principal_user)

    events = []
    with hub.subscribe("notifications", events.append, where={"recipient_id": principal_user.id}):
        response = await client.post(f"/api/v1/notifications/{notification.id}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["read"] is True
    assert events[0].event.value == "UPDATE"
    assert events[0].old_record["read"] is False

    unread = await client.get("/api/v1/notifications/unread-count", headers=headers)
    assert unread.json() == {"unread": 0}


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses_notification(client: AsyncClient, db_session, principal_user,
                                                      other_principal):
    (notification,) = await notify(db_session, principal_user)

    response = await client.post(
        f"/api/v1/notifications/{notification.id}/read", headers=get_auth_headers(other_principal)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_all_read(client: AsyncClient, db_session, principal_user):
    await notify(db_session, principal_user, count=3)
    headers = get_auth_headers(principal_user)

    response = await client.post("/api/v1/notifications/read-all", headers=headers)
    assert response.status_code == 200

    unread = await client.get("/api/v1/notifications/unread-count", headers=headers)
    assert unread.json()["unread"] == 0
