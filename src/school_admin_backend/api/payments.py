'''
Dashboard routes for Payments.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.finance import PaymentCreate, PaymentUpdate
from ..services.payment_service import PaymentService
from .base import CrudRoutes

payments_routes = CrudRoutes(
    segment="paiements",
    tag="Payments",
    service_cls=PaymentService,
    create_model=PaymentCreate,
    update_model=PaymentUpdate,
    list_route=PageRoute.PAYMENTS,
    messages=FormMessages(
        created="Paiement ajouté avec succès !",
        updated="Paiement mis à jour avec succès !"
    )
)
router = payments_routes.router
