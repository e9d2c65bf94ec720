'''
Dashboard routes for Notifications.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.notifications import NotificationCreate, NotificationUpdate
from ..services.notification_service import NotificationService
from .base import CrudRoutes

notifications_routes = CrudRoutes(
    segment="notifications",
    tag="Notifications",
    service_cls=NotificationService,
    create_model=NotificationCreate,
    update_model=NotificationUpdate,
    list_route=PageRoute.NOTIFICATIONS,
    messages=FormMessages(
        created="Notification ajoutée avec succès !",
        updated="Notification mise à jour avec succès !"
    )
)
router = notifications_routes.router
