'''
Access functions for fees (frais), joined to their school year.
'''
from sqlalchemy.orm import joinedload

from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.finance import FeeRead
from .base_service import CrudService, EntityLabels


class FeeService(CrudService[FeeRead]):
    model = db_models.Frais
    read_model = FeeRead
    entity = Entity.FEE
    labels = EntityLabels(
        of_one="du frais",
        of_many="des frais",
        not_found="Frais non trouvé."
    )
    order_by = (db_models.Frais.dateecheance.desc(), db_models.Frais.idfrais.desc())

    def load_options(self) -> list:
        return [joinedload(db_models.Frais.anneescolaire)]
