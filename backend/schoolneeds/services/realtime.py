"""
بث أحداث التغيير (إدراج/تحديث/حذف) لكل جدول إلى المشتركين
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from schoolneeds.core.constants import ChangeType

logger = logging.getLogger(__name__)

# مفتاح الأحداث المؤجلة في session.info
PENDING_CHANGES = "realtime_pending_changes"


@dataclass
class ChangeEvent:
    table: str
    event: ChangeType
    record: Dict[str, Any] = field(default_factory=dict)
    old_record: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        return {
            "table": self.table,
            "event": self.event.value,
            "record": self.record,
            "old_record": self.old_record,
        }


Callback = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


class Subscription:
    """Handle returned by ``ChangeHub.subscribe``; ``close()`` unregisters it."""

    def __init__(self, hub: "ChangeHub", table: str, callback: Callback, where: Optional[dict] = None):
        self.hub = hub
        self.table = table
        self.callback = callback
        self.where = dict(where or {})
        self.closed = False

    def matches(self, event: ChangeEvent) -> bool:
        if not self.where:
            return True
        # a delete only carries the old row
        record = event.record or event.old_record or {}
        return all(str(record.get(key)) == str(value) for key, value in self.where.items())

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.hub._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ChangeHub:
    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, table: str, callback: Callback, where: Optional[dict] = None) -> Subscription:
        subscription = Subscription(self, table, callback, where)
        self._subscriptions.setdefault(table, []).append(subscription)
        logger.debug("Subscribed to %s (where=%s)", table, subscription.where)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.table, [])
        if subscription in subscribers:
            subscribers.remove(subscription)

    def subscriber_count(self, table: Optional[str] = None) -> int:
        if table is not None:
            return len(self._subscriptions.get(table, []))
        return sum(len(subs) for subs in self._subscriptions.values())

    async def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` once to every matching subscriber; returns how many received it."""
        delivered = 0
        for subscription in list(self._subscriptions.get(event.table, [])):
            if subscription.closed or not subscription.matches(event):
                continue
            try:
                result = subscription.callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Realtime callback failed on %s %s", event.table, event.event.value)
            delivered += 1
        return delivered

    def subscribe_queue(
        self, table: str, where: Optional[dict] = None, maxsize: int = 100
    ) -> Tuple[Subscription, asyncio.Queue]:
        """
        Buffer matching events in a bounded queue that the caller drains at its
        own pace, so a slow consumer never holds up ``publish``. Events that
        arrive while the queue is full are dropped.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

        def enqueue(event: ChangeEvent) -> None:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Realtime queue full on %s, dropping %s event", table, event.event.value)

        return self.subscribe(table, enqueue, where), queue


hub = ChangeHub()


def queue_change(session, event: ChangeEvent) -> None:
    """Hold ``event`` on the session until its transaction commits."""
    session.info.setdefault(PENDING_CHANGES, []).append(event)


def discard_changes(session) -> List[ChangeEvent]:
    return session.info.pop(PENDING_CHANGES, [])


async def publish_committed(session, target: Optional[ChangeHub] = None) -> int:
    """Publish the events of a committed session, in the order they were queued."""
    target = target or hub
    delivered = 0
    for event in discard_changes(session):
        delivered += await target.publish(event)
    return delivered
