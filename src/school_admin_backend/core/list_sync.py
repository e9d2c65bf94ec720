'''
Keeps a list of rows in step with the change feed of its table.

The list is seeded with rows already joined to their relations. Change
payloads only carry the table's own columns, so INSERT and UPDATE rows have
their foreign keys resolved again before they enter the list.
'''
import asyncio
import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, NamedTuple, Optional

from pydantic import ValidationError

from ..common.config import settings
from ..common.logger import log
from ..models.ui import Toast, ToastLevel
from .realtime import ChangeEvent, ChangeType, Subscription, SubscriptionStatus

Row = dict[str, Any]


@dataclass(frozen=True)
class RelationResolver:
    """Fills row[attribute] with lookup(row[foreign_key]); a null key gives None."""
    attribute: str
    foreign_key: str
    lookup: Callable[[Any], Awaitable[Optional[Row]]]


class InsertPosition(str, enum.Enum):
    START = "start"
    END = "end"


class SyncMessages(NamedTuple):
    inserted: str
    updated: str
    deleted: str
    channel_error: str


class ListSynchronizer:
    def __init__(
        self,
        rows: Iterable[Row],
        key_fields: tuple[str, ...],
        relations: tuple[RelationResolver, ...] = (),
        notify: Optional[Callable[[Toast, Optional[ChangeEvent]], Awaitable[None]]] = None,
        insert_at: InsertPosition = InsertPosition.END,
        messages: Optional[SyncMessages] = None,
        shape: Optional[Callable[[Row], Row]] = None,
        concurrency: int = settings.REALTIME_LOOKUP_CONCURRENCY
    ):
        self.rows: list[Row] = list(rows)
        self.key_fields = key_fields
        self.relations = relations
        self.notify = notify
        self.insert_at = insert_at
        self.messages = messages or SyncMessages(
            inserted="Nouvel enregistrement ajouté en temps réel !",
            updated="Enregistrement mis à jour en temps réel !",
            deleted="Enregistrement supprimé en temps réel !",
            channel_error="Erreur de connexion en temps réel."
        )
        self.shape = shape
        self._lookups = asyncio.Semaphore(concurrency)
        self._subscription: Optional[Subscription] = None
        self.closed = False

    def key_of(self, row: Row) -> tuple:
        return tuple(row.get(field) for field in self.key_fields)

    # --- Relation resolution ---

    async def _resolve(self, resolver: RelationResolver, foreign_key: Any) -> Optional[Row]:
        if foreign_key is None:
            return None
        async with self._lookups:
            try:
                return await resolver.lookup(foreign_key)
            except Exception as e:
                log.warning(f"Lookup of '{resolver.attribute}' {foreign_key} failed, leaving it empty: {e}")
                return None

    async def enrich(self, row: Row) -> Row:
        resolved = await asyncio.gather(*(
            self._resolve(resolver, row.get(resolver.foreign_key)) for resolver in self.relations
        ))
        enriched = dict(row)
        for resolver, value in zip(self.relations, resolved):
            enriched[resolver.attribute] = value
        if self.shape is None:
            return enriched
        try:
            return self.shape(enriched)
        except ValidationError as e:
            log.warning(f"Could not shape realtime row {self.key_of(row)}, keeping it raw: {e}")
            return enriched

    # --- Change handling ---

    async def _emit(self, toast: Toast, change: Optional[ChangeEvent]) -> Toast:
        if self.notify is not None:
            await self.notify(toast, change)
        return toast

    async def apply(self, change: ChangeEvent) -> Optional[Toast]:
        """Applies one change to the list; returns the toast shown for it."""
        if self.closed:
            return None

        if change.event_type == ChangeType.DELETE:
            key = self.key_of(change.old)
            self.rows = [row for row in self.rows if self.key_of(row) != key]
            return await self._emit(Toast(level=ToastLevel.WARNING, title=self.messages.deleted), change)

        row = await self.enrich(change.new)
        if self.closed:
            # Closed while the lookups were running
            return None

        key = self.key_of(row)
        if change.event_type == ChangeType.INSERT and not any(self.key_of(existing) == key for existing in self.rows):
            if self.insert_at == InsertPosition.START:
                self.rows.insert(0, row)
            else:
                self.rows.append(row)
            return await self._emit(Toast(level=ToastLevel.SUCCESS, title=self.messages.inserted), change)

        # An UPDATE, or an INSERT already present in the snapshot
        self.rows = [row if self.key_of(existing) == key else existing for existing in self.rows]
        return await self._emit(Toast(level=ToastLevel.INFO, title=self.messages.updated), change)

    async def run(self, subscription: Subscription):
        """
        Consumes the subscription until it is closed or fails.
        A failed channel is reported once and not retried.
        """
        self._subscription = subscription
        async for change in subscription:
            await self.apply(change)
            if self.closed:
                break
        if subscription.status == SubscriptionStatus.CHANNEL_ERROR and not self.closed:
            log.error(f"Realtime channel for '{subscription.table}' failed.")
            await self._emit(Toast(level=ToastLevel.ERROR, title=self.messages.channel_error), None)

    def close(self):
        self.closed = True
        if self._subscription is not None:
            self._subscription.close()
