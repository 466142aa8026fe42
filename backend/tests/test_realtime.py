import pytest

from schoolneeds.core.constants import ChangeType
from schoolneeds.services.realtime import ChangeEvent, ChangeHub


@pytest.mark.asyncio
async def test_publish_reaches_subscribers_of_the_table_only():
    hub = ChangeHub()
    needs_seen, schools_seen = [], []
    hub.subscribe("needs", needs_seen.append)
    hub.subscribe("schools", schools_seen.append)

    delivered = await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "1"}))

    assert delivered == 1
    assert len(needs_seen) == 1
    assert schools_seen == []


@pytest.mark.asyncio
async def test_async_callbacks_are_awaited():
    hub = ChangeHub()
    seen = []

    async def callback(event):
        seen.append(event.record["id"])

    hub.subscribe("needs", callback)
    await hub.publish(ChangeEvent("needs", ChangeType.UPDATE, {"id": "7"}))
    assert seen == ["7"]


@pytest.mark.asyncio
async def test_where_filter_compares_as_strings():
    hub = ChangeHub()
    seen = []
    hub.subscribe("notifications", seen.append, where={"recipient_id": 42})

    await hub.publish(ChangeEvent("notifications", ChangeType.INSERT, {"recipient_id": "42"}))
    await hub.publish(ChangeEvent("notifications", ChangeType.INSERT, {"recipient_id": "43"}))

    assert len(seen) == 1


@pytest.mark.asyncio
async def test_where_filter_uses_old_record_on_delete():
    hub = ChangeHub()
    seen = []
    hub.subscribe("needs", seen.append, where={"school_id": "s1"})

    await hub.publish(ChangeEvent("needs", ChangeType.DELETE, old_record={"id": "n1", "school_id": "s1"}))
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_closed_subscription_receives_nothing():
    hub = ChangeHub()
    seen = []
    subscription = hub.subscribe("needs", seen.append)
    assert hub.subscriber_count("needs") == 1

    subscription.close()
    subscription.close()

    assert hub.subscriber_count() == 0
    assert await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "1"})) == 0
    assert seen == []


@pytest.mark.asyncio
async def test_subscription_as_context_manager():
    hub = ChangeHub()
    with hub.subscribe("schools", lambda event: None):
        assert hub.subscriber_count("schools") == 1
    assert hub.subscriber_count("schools") == 0


@pytest.mark.asyncio
async def test_failing_callback_does_not_stop_delivery():
    hub = ChangeHub()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    hub.subscribe("needs", broken)
    hub.subscribe("needs", seen.append)

    delivered = await hub.publish(ChangeEvent("needs", ChangeType.INSERT, {"id": "1"}))
    assert delivered == 2
    assert len(seen) == 1


def test_event_to_dict():
    event = ChangeEvent("needs", ChangeType.DELETE, {}, {"id": "1"})
    assert event.to_dict() == {
        "table": "needs",
        "event": "DELETE",
        "record": {},
        "old_record": {"id": "1"},
    }
