'''
Access functions for classes, always joined to their option.
'''
from sqlalchemy.orm import joinedload

from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.academics import ClassRead
from .base_service import CrudService, EntityLabels


class ClassService(CrudService[ClassRead]):
    model = db_models.Classe
    read_model = ClassRead
    entity = Entity.CLASS
    labels = EntityLabels(
        of_one="de la classe",
        of_many="des classes",
        not_found="Classe non trouvée."
    )
    order_by = (db_models.Classe.nomclasse,)

    def load_options(self) -> list:
        return [joinedload(db_models.Classe.option)]
