import asyncio

import pytest

from schoolneeds.api.v1.realtime import authorize_feed, forward_events, subscription_filter
from schoolneeds.core.constants import ChangeType
from schoolneeds.core.exceptions import AppException, NotFoundError, UnauthorizedError
from schoolneeds.core.security import create_access_token
from schoolneeds.services.realtime import ChangeEvent, ChangeHub
from tests.conftest import TestSessionLocal


def token_for(user) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role.value})


@pytest.mark.asyncio
async def test_notifications_are_scoped_to_recipient(db_session, principal_user, admin_user):
    assert await subscription_filter("notifications", principal_user, db_session) == {
        "recipient_id": principal_user.id
    }
    assert await subscription_filter("notifications", admin_user, db_session) == {
        "recipient_id": admin_user.id
    }


@pytest.mark.asyncio
async def test_admin_follows_every_row(db_session, admin_user):
    assert await subscription_filter("needs", admin_user, db_session) is None
    assert await subscription_filter("schools", admin_user, db_session) is None


@pytest.mark.asyncio
async def test_principal_follows_own_school_needs(db_session, principal_user, school):
    assert await subscription_filter("needs", principal_user, db_session) == {"school_id": school.id}


@pytest.mark.asyncio
async def test_principal_without_school_cannot_follow_needs(db_session, principal_user):
    with pytest.raises(NotFoundError):
        await subscription_filter("needs", principal_user, db_session)


@pytest.mark.asyncio
async def test_principal_cannot_follow_schools(db_session, principal_user, school):
    with pytest.raises(AppException) as exc_info:
        await subscription_filter("schools", principal_user, db_session)
    assert exc_info.value.error_code == "FORBIDDEN"


# === المصادقة على جلسة قصيرة ===

@pytest.mark.asyncio
async def test_authorize_feed_closes_its_session(principal_user, school):
    opened = []

    def factory():
        session = TestSessionLocal()
        opened.append(session)
        return session

    where = await authorize_feed("needs", token_for(principal_user), factory)

    assert where == {"school_id": school.id}
    assert len(opened) == 1
    assert not opened[0].in_transaction()


@pytest.mark.asyncio
async def test_authorize_feed_rejects_bad_token(setup_db):
    with pytest.raises(UnauthorizedError):
        await authorize_feed("needs", "not-a-token", TestSessionLocal)
    with pytest.raises(UnauthorizedError):
        await authorize_feed("needs", None, TestSessionLocal)


# === الإرسال عبر طابور لكل اتصال ===

class SlowSocket:
    def __init__(self):
        self.sent = []
        self.release = asyncio.Event()

    async def send_json(self, data):
        await self.release.wait()
        self.sent.append(data)


@pytest.mark.asyncio
async def test_slow_socket_does_not_block_publish():
    hub = ChangeHub()
    socket = SlowSocket()
    subscription, queue = hub.subscribe_queue("needs")
    sender = asyncio.create_task(forward_events(socket, queue))

    # publish يعود فوراً رغم أن المرسل عالق
    delivered = await asyncio.wait_for(
        hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "1"})), timeout=1
    )
    assert delivered == 1
    await hub.publish(ChangeEvent("needs", ChangeType.UPDATE, {"id": "1"}))
    assert socket.sent == []

    socket.release.set()
    for _ in range(20):
        if len(socket.sent) == 2:
            break
        await asyncio.sleep(0.01)
    assert [item["event"] for item in socket.sent] == ["INSERT", "UPDATE"]

    subscription.close()
    sender.cancel()


@pytest.mark.asyncio
async def test_full_queue_drops_events():
    hub = ChangeHub()
    subscription, queue = hub.subscribe_queue("needs", maxsize=1)

    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "1"}))
    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "2"}))

    assert queue.qsize() == 1
    assert queue.get_nowait().record == {"id": "1"}
    subscription.close()


@pytest.mark.asyncio
async def test_queue_subscription_respects_row_filter():
    hub = ChangeHub()
    subscription, queue = hub.subscribe_queue("needs", where={"school_id": "s1"})

    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"school_id": "s2"}))
    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"school_id": "s1"}))

    assert queue.qsize() == 1
    subscription.close()
