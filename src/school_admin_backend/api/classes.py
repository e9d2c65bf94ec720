'''
Dashboard routes for Classes.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.academics import ClassCreate, ClassUpdate
from ..services.class_service import ClassService
from .base import CrudRoutes

classes_routes = CrudRoutes(
    segment="classes",
    tag="Classes",
    service_cls=ClassService,
    create_model=ClassCreate,
    update_model=ClassUpdate,
    list_route=PageRoute.CLASSES,
    messages=FormMessages(
        created="Classe ajoutée avec succès !",
        updated="Classe mise à jour avec succès !"
    )
)
router = classes_routes.router
