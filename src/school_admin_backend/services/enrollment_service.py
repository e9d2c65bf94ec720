'''
Access functions for enrollments (inscriptions).
An enrollment is keyed by (ideleve, idclasse, idanneescolaire); the key never
changes, moving a student means deleting and re-creating the enrollment.
'''
from sqlalchemy.orm import joinedload

from ..common.logger import log
from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.enrollments import EnrollmentRead
from ..models.envelope import Result
from .base_service import CrudService, EntityLabels


class EnrollmentService(CrudService[EnrollmentRead]):
    model = db_models.Inscription
    read_model = EnrollmentRead
    entity = Entity.ENROLLMENT
    labels = EntityLabels(
        of_one="de l'inscription",
        of_many="des inscriptions",
        not_found="Inscription non trouvée."
    )
    order_by = (
        db_models.Inscription.dateinscription.desc(),
        db_models.Inscription.ideleve.desc(),
        db_models.Inscription.idclasse.desc(),
        db_models.Inscription.idanneescolaire.desc()
    )

    def load_options(self) -> list:
        return [
            joinedload(db_models.Inscription.eleve),
            joinedload(db_models.Inscription.classe).joinedload(db_models.Classe.option),
            joinedload(db_models.Inscription.anneescolaire)
        ]

    async def recent(self, limit: int) -> Result[list[EnrollmentRead]]:
        """The 'limit' latest enrollments, newest first."""
        log.info(f"Fetching the {limit} most recent enrollments.")

        async def operation():
            stmt = self._select().order_by(*self.order_by).limit(limit)
            result = await self.db.execute(stmt)
            return Result.ok([self.to_read(row) for row in result.unique().scalars().all()])

        return await self._guard("de la récupération des inscriptions récentes", operation)
