'''
Dashboard routes for Fees.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.finance import FeeCreate, FeeUpdate
from ..services.fee_service import FeeService
from .base import CrudRoutes

fees_routes = CrudRoutes(
    segment="frais",
    tag="Fees",
    service_cls=FeeService,
    create_model=FeeCreate,
    update_model=FeeUpdate,
    list_route=PageRoute.FEES,
    messages=FormMessages(
        created="Frais ajouté avec succès !",
        updated="Frais mis à jour avec succès !"
    )
)
router = fees_routes.router
