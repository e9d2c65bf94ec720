'''
Access functions for school years (années scolaires).
'''
from typing import Any

from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.academics import DATES_ORDER_ERROR, SchoolYearRead
from .base_service import CrudService, EntityLabels


class SchoolYearService(CrudService[SchoolYearRead]):
    model = db_models.Anneescolaire
    read_model = SchoolYearRead
    entity = Entity.SCHOOL_YEAR
    labels = EntityLabels(
        of_one="de l'année scolaire",
        of_many="des années scolaires",
        not_found="Année scolaire non trouvée."
    )
    order_by = (db_models.Anneescolaire.datedebut.desc(),)

    def check_update(self, instance, values: dict[str, Any]) -> dict[str, list[str]]:
        datedebut = values.get("datedebut", instance.datedebut)
        datefin = values.get("datefin", instance.datefin)
        if datedebut is not None and datefin is not None and datefin < datedebut:
            return {"datefin": [DATES_ORDER_ERROR]}
        return {}
