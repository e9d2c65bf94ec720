'''
Access functions for options (study tracks a class belongs to).
'''
from ..core.invalidation import Entity
from ..database import models as db_models
from ..models.academics import OptionRead
from .base_service import CrudService, EntityLabels


class OptionService(CrudService[OptionRead]):
    model = db_models.Option
    read_model = OptionRead
    entity = Entity.OPTION
    labels = EntityLabels(
        of_one="de l'option",
        of_many="des options",
        not_found="Option non trouvée."
    )
    order_by = (db_models.Option.idoption,)
