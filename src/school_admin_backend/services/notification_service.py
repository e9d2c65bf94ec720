'''
Access functions for notifications.
'''
from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from ..common.logger import log
from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.envelope import Result
from ..models.notifications import NotificationRead
from .base_service import CrudService, EntityLabels


class NotificationService(CrudService[NotificationRead]):
    model = db_models.Notification
    read_model = NotificationRead
    entity = Entity.NOTIFICATION
    labels = EntityLabels(
        of_one="de la notification",
        of_many="des notifications",
        not_found="Notification non trouvée."
    )
    order_by = (db_models.Notification.dateenvoi.desc(), db_models.Notification.idnotification.desc())

    def load_options(self) -> list:
        return [joinedload(db_models.Notification.parent)]

    async def list_for_parent(self, idparent: int) -> Result[list[NotificationRead]]:
        """The parent's own notifications plus those sent to every parent."""
        log.info(f"Fetching notifications visible to parent {idparent}.")

        async def operation():
            stmt = (
                self._select()
                .where(or_(
                    db_models.Notification.idparent == idparent,
                    db_models.Notification.idparent.is_(None)
                ))
                .order_by(*self.order_by)
            )
            result = await self.db.execute(stmt)
            return Result.ok([self.to_read(row) for row in result.unique().scalars().all()])

        return await self._guard("de la récupération des notifications du parent", operation)
