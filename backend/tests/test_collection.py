import asyncio

import pytest

from schoolneeds.core.constants import ChangeType, SortKey
from schoolneeds.schemas.listing import NeedFilters
from schoolneeds.services.realtime import ChangeEvent, ChangeHub
from schoolneeds.client.collection import LiveCollection


def need(id, **kwargs):
    record = {"id": id, "title": f"Need {id}", "category": "furniture", "priority": "medium",
              "status": "pending", "created_at": f"2024-01-0{id}T00:00:00Z"}
    record.update(kwargs)
    return record


def ids(records):
    return [r["id"] for r in records]


async def loader_of(records):
    return list(records)


@pytest.mark.asyncio
async def test_refresh_replaces_items_and_notifies():
    collection = LiveCollection("needs")
    snapshots = []
    collection.on_change(snapshots.append)

    await collection.refresh(lambda: loader_of([need("1"), need("2")]))

    assert ids(collection.items) == ["1", "2"]
    assert len(snapshots) == 1


@pytest.mark.asyncio
async def test_stale_refresh_is_discarded():
    collection = LiveCollection("needs")
    release = asyncio.Event()

    async def slow():
        await release.wait()
        return [need("1")]

    async def fast():
        return [need("2")]

    first = asyncio.ensure_future(collection.refresh(slow))
    await asyncio.sleep(0)
    await collection.refresh(fast)
    release.set()
    await first

    assert ids(collection.items) == ["2"]


@pytest.mark.asyncio
async def test_failed_refresh_keeps_items():
    collection = LiveCollection("needs")
    await collection.refresh(lambda: loader_of([need("1")]))

    async def failing():
        raise RuntimeError("network down")

    with pytest.raises(RuntimeError):
        await collection.refresh(failing)
    assert ids(collection.items) == ["1"]


def test_apply_insert_update_delete():
    collection = LiveCollection("needs")
    collection.apply(ChangeEvent("needs", ChangeType.INSERT, need("1")))
    collection.apply(ChangeEvent("needs", ChangeType.INSERT, need("2")))
    assert ids(collection.items) == ["2", "1"]

    collection.apply({"event": "UPDATE", "record": {"id": "1", "status": "fulfilled"}})
    assert collection.items[1]["status"] == "fulfilled"
    assert collection.items[1]["title"] == "Need 1"

    collection.apply({"event": "DELETE", "record": {}, "old_record": {"id": "2"}})
    assert ids(collection.items) == ["1"]


def test_apply_replaces_list_instead_of_mutating():
    collection = LiveCollection("needs")
    collection.apply(ChangeEvent("needs", ChangeType.INSERT, need("1")))
    before = collection.items
    collection.apply(ChangeEvent("needs", ChangeType.INSERT, need("2")))
    assert ids(before) == ["1"]


@pytest.mark.asyncio
async def test_mutations_apply_only_after_confirmation():
    collection = LiveCollection("needs")

    async def create():
        return need("3")

    async def failing_save():
        raise RuntimeError("rejected")

    await collection.add(create)
    assert ids(collection.items) == ["3"]

    with pytest.raises(RuntimeError):
        await collection.update(failing_save)
    assert collection.items[0]["status"] == "pending"

    async def delete():
        return None

    await collection.remove("3", delete)
    assert collection.items == []


@pytest.mark.asyncio
async def test_view_and_stats_follow_items():
    collection = LiveCollection("needs")
    await collection.refresh(lambda: loader_of([
        need("1", priority="low"),
        need("2", priority="high"),
        need("3", category="technology", status="fulfilled"),
    ]))

    assert ids(collection.view(NeedFilters(category="furniture"), SortKey.PRIORITY)) == ["2", "1"]
    stats = collection.need_stats()
    assert stats.total == 3
    assert stats.urgent == 1
    assert stats.fulfillment_rate == 33


@pytest.mark.asyncio
async def test_follow_and_close():
    hub = ChangeHub()
    collection = LiveCollection("needs")
    collection.follow(hub)

    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, need("1")))
    assert ids(collection.items) == ["1"]

    collection.close()
    assert hub.subscriber_count("needs") == 0
    await hub.publish(ChangeEvent("needs", ChangeType.INSERT, need("2")))
    assert ids(collection.items) == ["1"]


def test_unsubscribed_listener_is_not_called():
    collection = LiveCollection("needs")
    calls = []
    unsubscribe = collection.on_change(calls.append)
    unsubscribe()
    collection.apply(ChangeEvent("needs", ChangeType.INSERT, need("1")))
    assert calls == []
