'''
Row-level change notifications.

SQLAlchemy session events capture every INSERT, UPDATE and DELETE flushed by
a session; the captured rows are published to the in-process ChangeFeed once
the transaction commits, and dropped if it rolls back.
Subscribers receive them table by table.
'''
import asyncio
import datetime
import decimal
import enum
from collections import defaultdict
from typing import Any, Optional

from pydantic import BaseModel, Field
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from ..common.config import settings
from ..common.logger import log

PENDING_CHANGES_KEY = "pending_changes"


class ChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class SubscriptionStatus(str, enum.Enum):
    SUBSCRIBED = "SUBSCRIBED"
    CHANNEL_ERROR = "CHANNEL_ERROR"
    CLOSED = "CLOSED"


class ChangeEvent(BaseModel):
    """
    One committed row change.
    'new' carries the row after INSERT/UPDATE, 'old' the row before DELETE
    (and the primary key for UPDATE).
    """
    table: str
    event_type: ChangeType
    new: dict[str, Any] = Field(default_factory=dict)
    old: dict[str, Any] = Field(default_factory=dict)
    commit_timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


class Subscription:
    """
    A per-table channel. Iterating it yields ChangeEvents until it is closed
    or its queue overflows (CHANNEL_ERROR).
    """
    def __init__(self, feed: 'ChangeFeed', table: str, maxsize: int):
        self.feed = feed
        self.table = table
        self.status = SubscriptionStatus.SUBSCRIBED
        self._queue: asyncio.Queue[Optional[ChangeEvent]] = asyncio.Queue(maxsize=maxsize)

    def push(self, change: ChangeEvent):
        if self.status != SubscriptionStatus.SUBSCRIBED:
            return
        try:
            self._queue.put_nowait(change)
        except asyncio.QueueFull:
            log.error(f"Realtime subscription to '{self.table}' overflowed; marking channel as failed.")
            self.status = SubscriptionStatus.CHANNEL_ERROR
            self._wake()

    def close(self):
        if self.status == SubscriptionStatus.SUBSCRIBED:
            self.status = SubscriptionStatus.CLOSED
        self.feed.unsubscribe(self)
        self._wake()

    def _wake(self):
        # The None sentinel ends any pending __anext__
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeEvent:
        if self.status != SubscriptionStatus.SUBSCRIBED and self._queue.empty():
            raise StopAsyncIteration
        change = await self._queue.get()
        if change is None or self.status == SubscriptionStatus.CHANNEL_ERROR:
            raise StopAsyncIteration
        return change


class ChangeFeed:
    """In-process broker of committed row changes, keyed by table name."""
    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    def subscribe(self, table: str) -> Subscription:
        subscription = Subscription(self, table, self.queue_size)
        self._subscribers[table].add(subscription)
        log.info(f"Realtime subscription to table '{table}' is active.")
        return subscription

    def unsubscribe(self, subscription: Subscription):
        self._subscribers[subscription.table].discard(subscription)

    def subscriber_count(self, table: str) -> int:
        return len(self._subscribers[table])

    def publish(self, change: ChangeEvent):
        for subscription in list(self._subscribers[change.table]):
            subscription.push(change)


change_feed = ChangeFeed(queue_size=settings.REALTIME_QUEUE_SIZE)


# --- Session event hooks ---

def _jsonable(value: Any) -> Any:
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def row_payload(instance: Any) -> dict[str, Any]:
    """Column values currently loaded on an ORM instance (no lazy loading)."""
    state = inspect(instance)
    loaded = state.dict
    return {
        attr.key: _jsonable(loaded.get(attr.key))
        for attr in state.mapper.column_attrs
        if attr.key in loaded
    }


def primary_key_payload(instance: Any) -> dict[str, Any]:
    state = inspect(instance)
    return {
        column.key: _jsonable(value)
        for column, value in zip(state.mapper.primary_key, state.identity or ())
    }


def _capture_flush(session: Session, flush_context):
    pending = session.info.setdefault(PENDING_CHANGES_KEY, [])
    for instance in session.new:
        pending.append(ChangeEvent(
            table=instance.__tablename__,
            event_type=ChangeType.INSERT,
            new=row_payload(instance),
        ))
    for instance in session.dirty:
        if not session.is_modified(instance, include_collections=False):
            continue
        pending.append(ChangeEvent(
            table=instance.__tablename__,
            event_type=ChangeType.UPDATE,
            new=row_payload(instance),
            old=primary_key_payload(instance),
        ))
    for instance in session.deleted:
        pending.append(ChangeEvent(
            table=instance.__tablename__,
            event_type=ChangeType.DELETE,
            old=row_payload(instance),
        ))


def _publish_commit(session: Session):
    pending = session.info.pop(PENDING_CHANGES_KEY, [])
    for change in pending:
        change_feed.publish(change)


def _discard_rollback(session: Session):
    session.info.pop(PENDING_CHANGES_KEY, None)


def install_change_capture():
    """Registers the session hooks once; later calls are no-ops."""
    if event.contains(Session, "after_flush", _capture_flush):
        return
    event.listen(Session, "after_flush", _capture_flush)
    event.listen(Session, "after_commit", _publish_commit)
    event.listen(Session, "after_rollback", _discard_rollback)
    log.info("Realtime change capture installed on ORM sessions.")
