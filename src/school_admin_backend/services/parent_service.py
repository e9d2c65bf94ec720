'''
Access functions for parents.
'''
from typing import Optional

from sqlalchemy import func, or_, select

from ..common.logger import log
from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.envelope import Result
from ..models.families import ParentRead
from .base_service import CrudService, EntityLabels


class ParentService(CrudService[ParentRead]):
    model = db_models.Parent
    read_model = ParentRead
    entity = Entity.PARENT
    labels = EntityLabels(
        of_one="du parent",
        of_many="des parents",
        not_found="Parent non trouvé."
    )
    order_by = (db_models.Parent.idparent,)

    async def find_id_by_email(self, email: str) -> Result[Optional[int]]:
        """
        The id of the parent whose father's or mother's e-mail is 'email'
        (case-insensitive), or None when no parent matches.
        """
        log.info(f"Looking up parent by e-mail {email}.")

        async def operation():
            normalized = email.strip().lower()
            stmt = (
                select(db_models.Parent.idparent)
                .where(or_(
                    func.lower(db_models.Parent.emailpere) == normalized,
                    func.lower(db_models.Parent.emailmere) == normalized
                ))
                .order_by(db_models.Parent.idparent)
                .limit(1)
            )
            result = await self.db.execute(stmt)
            return Result.ok(result.scalar_one_or_none())

        return await self._guard("de la vérification de l'e-mail du parent", operation)
