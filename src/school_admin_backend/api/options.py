'''
Dashboard routes for Options.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.academics import OptionCreate, OptionUpdate
from ..services.option_service import OptionService
from .base import CrudRoutes

options_routes = CrudRoutes(
    segment="options",
    tag="Options",
    service_cls=OptionService,
    create_model=OptionCreate,
    update_model=OptionUpdate,
    list_route=PageRoute.OPTIONS,
    messages=FormMessages(
        created="Option ajoutée avec succès !",
        updated="Option mise à jour avec succès !"
    )
)
router = options_routes.router
