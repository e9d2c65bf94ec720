'''
The parent portal: a parent's file and children, their payments and their notifications.
'''
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ..core.invalidation import PageRoute, RouteInvalidator, get_route_invalidator
from ..database import models as db_models
from ..services.portal_service import PortalService
from ..services.security import require_parent
from .base import not_modified, page_response


class PortalAPI:
    def __init__(self):
        self.router = APIRouter(
            prefix="/parents",
            tags=["Parent portal"]
        )
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route("", self.get_home, methods=["GET"])
        self.router.add_api_route("/paiements", self.get_payments, methods=["GET"])
        self.router.add_api_route("/notifications", self.get_notifications, methods=["GET"])

    @staticmethod
    def _scope(current_user: db_models.Users) -> str:
        """ETag scope of the signed-in parent."""
        return f"parent{current_user.idparent}"

    async def get_home(
        self,
        request: Request,
        current_user: Annotated[db_models.Users, Depends(require_parent)],
        portal_service: Annotated[PortalService, Depends(PortalService)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        """The parent's file with each child and the child's class."""
        cached = not_modified(request, invalidator, PageRoute.PORTAL, scope=self._scope(current_user), private=True)
        if cached is not None:
            return cached
        result = await portal_service.home(current_user.idparent)
        return page_response(invalidator, PageRoute.PORTAL, result, scope=self._scope(current_user), private=True)

    async def get_payments(
        self,
        request: Request,
        current_user: Annotated[db_models.Users, Depends(require_parent)],
        portal_service: Annotated[PortalService, Depends(PortalService)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        cached = not_modified(request, invalidator, PageRoute.PORTAL_PAYMENTS, scope=self._scope(current_user), private=True)
        if cached is not None:
            return cached
        result = await portal_service.payments(current_user.idparent)
        return page_response(invalidator, PageRoute.PORTAL_PAYMENTS, result, scope=self._scope(current_user), private=True)

    async def get_notifications(
        self,
        request: Request,
        current_user: Annotated[db_models.Users, Depends(require_parent)],
        portal_service: Annotated[PortalService, Depends(PortalService)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        """The parent's own notifications and those sent to every parent."""
        cached = not_modified(request, invalidator, PageRoute.PORTAL_NOTIFICATIONS, scope=self._scope(current_user), private=True)
        if cached is not None:
            return cached
        result = await portal_service.notifications(current_user.idparent)
        return page_response(invalidator, PageRoute.PORTAL_NOTIFICATIONS, result, scope=self._scope(current_user), private=True)


portal_api = PortalAPI()
router = portal_api.router
