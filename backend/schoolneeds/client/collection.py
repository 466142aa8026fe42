"""
مجموعة محلية من السجلات تتحدث من الخادم ومن أحداث التغيير
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from pydantic import BaseModel

from schoolneeds.core.constants import ChangeType, SortKey
from schoolneeds.schemas.listing import NeedFilters, SchoolFilters
from schoolneeds.schemas.stats import NeedStats, SchoolStats
from schoolneeds.services import listing_service, stats_service
from schoolneeds.services.realtime import ChangeEvent, ChangeHub, Subscription

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Iterable[Any]]]
Listener = Callable[[List[dict]], None]


def as_record(item: Any) -> dict:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    return dict(item)


class LiveCollection:
    """
    The in-memory collection behind one listing view.

    The backend is the serialisation point: local state only changes after a
    fetch or a confirmed mutation. Every change replaces ``items`` with a new
    list and notifies listeners, who re-run ``view``/statistics on it.
    """

    def __init__(self, table: str, key: str = "id"):
        self.table = table
        self.key = key
        self.items: List[dict] = []
        self._listeners: List[Listener] = []
        self._subscriptions: List[Subscription] = []
        self._fetch: Optional[asyncio.Task] = None
        self._generation = 0

    # === تحميل ===

    async def refresh(self, loader: Loader) -> List[dict]:
        """
        Replace the collection with ``await loader()``.

        A fetch still running from an earlier call is cancelled, and a result
        that arrives after a newer refresh started is discarded.
        """
        if self._fetch is not None and not self._fetch.done():
            self._fetch.cancel()

        self._generation += 1
        generation = self._generation
        task = asyncio.ensure_future(loader())
        self._fetch = task

        try:
            loaded = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug("Stale %s fetch abandoned", self.table)
                return self.items
            raise
        finally:
            if self._fetch is task:
                self._fetch = None

        if generation != self._generation:
            return self.items
        self._replace([as_record(item) for item in loaded])
        return self.items

    # === التعديل بعد تأكيد الخادم ===

    def apply(self, event: Union[ChangeEvent, dict]) -> None:
        """Patch the collection from a change event (hub object or WebSocket JSON)."""
        if isinstance(event, ChangeEvent):
            kind, record, old = event.event, event.record, event.old_record
        else:
            kind, record, old = ChangeType(event["event"]), event.get("record"), event.get("old_record")

        if kind == ChangeType.DELETE:
            target = (old or record or {}).get(self.key)
            self._replace([item for item in self.items if item.get(self.key) != target])
            return

        record = as_record(record or {})
        target = record.get(self.key)
        for index, item in enumerate(self.items):
            if item.get(self.key) == target:
                items = list(self.items)
                items[index] = {**item, **record}
                self._replace(items)
                return
        # unseen row: newest first
        self._replace([record] + self.items)

    async def add(self, create: Callable[[], Awaitable[Any]]) -> dict:
        record = as_record(await create())
        self.apply(ChangeEvent(self.table, ChangeType.INSERT, record))
        return record

    async def update(self, save: Callable[[], Awaitable[Any]]) -> dict:
        record = as_record(await save())
        self.apply(ChangeEvent(self.table, ChangeType.UPDATE, record))
        return record

    async def remove(self, record_id: Any, delete: Callable[[], Awaitable[Any]]) -> None:
        await delete()
        self.apply(ChangeEvent(self.table, ChangeType.DELETE, old_record={self.key: str(record_id)}))

    # === العرض ===

    def view(self, filters: Union[NeedFilters, SchoolFilters, None] = None, sort: SortKey = SortKey.NEWEST) -> List[dict]:
        if self.table == "schools":
            return listing_service.list_schools(self.items, filters, sort)
        return listing_service.list_needs(self.items, filters, sort)

    def need_stats(self) -> NeedStats:
        return stats_service.need_stats(self.items)

    def school_stats(self) -> SchoolStats:
        return stats_service.school_stats(self.items)

    # === الاشتراكات ===

    def on_change(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def follow(self, hub: ChangeHub, table: Optional[str] = None, where: Optional[dict] = None) -> Subscription:
        """Apply every change published for the table; closed together with the collection."""
        subscription = hub.subscribe(table or self.table, self.apply, where)
        self._subscriptions.append(subscription)
        return subscription

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()
        if self._fetch is not None and not self._fetch.done():
            self._fetch.cancel()
        self._listeners.clear()

    def _replace(self, items: List[dict]) -> None:
        self.items = items
        for listener in list(self._listeners):
            try:
                listener(self.items)
            except Exception:
                logger.exception("Collection listener failed on %s", self.table)
