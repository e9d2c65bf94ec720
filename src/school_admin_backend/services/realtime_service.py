'''
Live lists of the dashboard: the initial snapshot of a table and the
ListSynchronizer that keeps it current.
'''
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..common.logger import log
from ..core.invalidation import Entity, RouteInvalidator, get_route_invalidator
from ..core.list_sync import InsertPosition, ListSynchronizer, RelationResolver, Row, SyncMessages
from ..core.realtime import ChangeFeed, change_feed
from ..database.engine import get_session_factory
from ..models.envelope import Result
from .base_service import CrudService
from .class_service import ClassService
from .enrollment_service import EnrollmentService
from .fee_service import FeeService
from .media_service import get_media_host
from .notification_service import NotificationService
from .option_service import OptionService
from .parent_service import ParentService
from .payment_service import PaymentService
from .school_year_service import SchoolYearService
from .student_service import StudentService


@dataclass(frozen=True)
class RelationSpec:
    attribute: str
    foreign_key: str
    service: type[CrudService]


@dataclass(frozen=True)
class TableSync:
    service: type[CrudService]
    key_fields: tuple[str, ...]
    insert_at: InsertPosition
    messages: SyncMessages
    relations: tuple[RelationSpec, ...] = ()


TABLE_SYNCS: dict[str, TableSync] = {
    Entity.SCHOOL_YEAR.value: TableSync(
        service=SchoolYearService,
        key_fields=("idanneescolaire",),
        insert_at=InsertPosition.END,
        messages=SyncMessages(
            inserted="Nouvelle année scolaire ajoutée en temps réel !",
            updated="Année scolaire mise à jour en temps réel !",
            deleted="Année scolaire supprimée en temps réel !",
            channel_error="Erreur de connexion en temps réel aux années scolaires."
        )
    ),
    Entity.OPTION.value: TableSync(
        service=OptionService,
        key_fields=("idoption",),
        insert_at=InsertPosition.END,
        messages=SyncMessages(
            inserted="Nouvelle option ajoutée en temps réel !",
            updated="Option mise à jour en temps réel !",
            deleted="Option supprimée en temps réel !",
            channel_error="Erreur de connexion en temps réel aux options."
        )
    ),
    Entity.CLASS.value: TableSync(
        service=ClassService,
        key_fields=("idclasse",),
        insert_at=InsertPosition.START,
        messages=SyncMessages(
            inserted="Nouvelle classe ajoutée en temps réel !",
            updated="Classe mise à jour en temps réel !",
            deleted="Classe supprimée en temps réel !",
            channel_error="Erreur de connexion en temps réel aux classes."
        ),
        relations=(RelationSpec("option", "idoption", OptionService),)
    ),
    Entity.PARENT.value: TableSync(
        service=ParentService,
        key_fields=("idparent",),
        insert_at=InsertPosition.END,
        messages=SyncMessages(
            inserted="Nouveau parent ajouté en temps réel !",
            updated="Parent mis à jour en temps réel !",
            deleted="Parent supprimé en temps réel !",
            channel_error="Erreur de connexion en temps réel aux parents."
        )
    ),
    Entity.STUDENT.value: TableSync(
        service=StudentService,
        key_fields=("ideleve",),
        insert_at=InsertPosition.START,
        messages=SyncMessages(
            inserted="Nouvel élève ajouté en temps réel !",
            updated="Élève mis à jour en temps réel !",
            deleted="Élève supprimé en temps réel !",
            channel_error="Erreur de connexion en temps réel aux élèves."
        ),
        relations=(RelationSpec("parent", "idparent", ParentService),)
    ),
    Entity.FEE.value: TableSync(
        service=FeeService,
        key_fields=("idfrais",),
        insert_at=InsertPosition.START,
        messages=SyncMessages(
            inserted="Nouveau frais ajouté en temps réel !",
            updated="Frais mis à jour en temps réel !",
            deleted="Frais supprimé en temps réel !",
            channel_error="Erreur de connexion en temps réel aux frais."
        ),
        relations=(RelationSpec("anneescolaire", "idanneescolaire", SchoolYearService),)
    ),
    Entity.ENROLLMENT.value: TableSync(
        service=EnrollmentService,
        key_fields=("ideleve", "idclasse", "idanneescolaire"),
        insert_at=InsertPosition.START,
        messages=SyncMessages(
            inserted="Nouvelle inscription ajoutée en temps réel !",
            updated="Inscription mise à jour en temps réel !",
            deleted="Inscription supprimée en temps réel !",
            channel_error="Erreur de connexion en temps réel aux inscriptions."
        ),
        relations=(
            RelationSpec("eleve", "ideleve", StudentService),
            RelationSpec("classe", "idclasse", ClassService),
            RelationSpec("anneescolaire", "idanneescolaire", SchoolYearService),
        )
    ),
    Entity.PAYMENT.value: TableSync(
        service=PaymentService,
        key_fields=("idpaiement",),
        insert_at=InsertPosition.START,
        messages=SyncMessages(
            inserted="Nouveau paiement ajouté en temps réel !",
            updated="Paiement mis à jour en temps réel !",
            deleted="Paiement supprimé en temps réel !",
            channel_error="Erreur de connexion en temps réel aux paiements."
        ),
        relations=(
            RelationSpec("eleve", "ideleve", StudentService),
            RelationSpec("frais", "idfrais", FeeService),
        )
    ),
    Entity.NOTIFICATION.value: TableSync(
        service=NotificationService,
        key_fields=("idnotification",),
        insert_at=InsertPosition.END,
        messages=SyncMessages(
            inserted="Nouvelle notification ajoutée en temps réel !",
            updated="Notification mise à jour en temps réel !",
            deleted="Notification supprimée en temps réel !",
            channel_error="Erreur de connexion en temps réel aux notifications."
        ),
        relations=(RelationSpec("parent", "idparent", ParentService),)
    ),
}


class RealtimeService:
    """
    Builds live lists. Every read (the snapshot and each relation lookup)
    runs on its own short-lived session.
    """
    def __init__(
        self,
        session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        self.session_factory = session_factory
        self.invalidator = invalidator
        self.feed: ChangeFeed = change_feed

    def _service(self, service_cls: type[CrudService], db: AsyncSession) -> CrudService:
        if issubclass(service_cls, StudentService):
            return service_cls(db, self.invalidator, get_media_host())
        return service_cls(db, self.invalidator)

    async def snapshot(self, table: str) -> Result[list[Row]]:
        config = TABLE_SYNCS[table]
        async with self.session_factory() as db:
            result = await self._service(config.service, db).list()
        if not result.success:
            return Result.fail(result.error, result.code)
        return Result.ok([row.model_dump(mode="json") for row in result.data])

    def _lookup(self, service_cls: type[CrudService]):
        async def lookup(key: Any) -> Optional[Row]:
            async with self.session_factory() as db:
                result = await self._service(service_cls, db).get_by_id(key)
            if not result.success:
                log.warning(f"Realtime lookup of {service_cls.__name__} {key} failed: {result.error}")
                return None
            return result.data.model_dump(mode="json")
        return lookup

    def synchronizer(self, table: str, rows: list[Row], notify=None) -> ListSynchronizer:
        config = TABLE_SYNCS[table]
        read_model = config.service.read_model
        return ListSynchronizer(
            rows=rows,
            key_fields=config.key_fields,
            relations=tuple(
                RelationResolver(spec.attribute, spec.foreign_key, self._lookup(spec.service))
                for spec in config.relations
            ),
            notify=notify,
            insert_at=config.insert_at,
            messages=config.messages,
            shape=lambda row: read_model.model_validate(row).model_dump(mode="json")
        )
