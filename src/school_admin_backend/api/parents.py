'''
Dashboard routes for Parents.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.families import ParentCreate, ParentUpdate
from ..services.parent_service import ParentService
from .base import CrudRoutes

parents_routes = CrudRoutes(
    segment="parents",
    tag="Parents",
    service_cls=ParentService,
    create_model=ParentCreate,
    update_model=ParentUpdate,
    list_route=PageRoute.PARENTS,
    messages=FormMessages(
        created="Parent ajouté avec succès !",
        updated="Parent mis à jour avec succès !"
    )
)
router = parents_routes.router
