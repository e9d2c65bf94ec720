'''
The dashboard root: counters, monthly payments and recent enrollments.
'''
import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from ..core.invalidation import PageRoute, RouteInvalidator, get_route_invalidator
from ..models.dashboard import DashboardSummary
from ..services.dashboard_service import DashboardService
from ..services.security import require_admin
from .base import not_modified


def current_day() -> datetime.date:
    return datetime.date.today()


class DashboardAPI:
    def __init__(self):
        self.router = APIRouter(
            prefix="/dashboard",
            tags=["Dashboard"],
            dependencies=[Depends(require_admin)]
        )
        self._register_routes()

    def _register_routes(self):
        self.router.add_api_route(
            "",
            self.get_summary,
            methods=["GET"],
            response_model=DashboardSummary
        )

    async def get_summary(
        self,
        request: Request,
        response: Response,
        dashboard_service: Annotated[DashboardService, Depends(DashboardService)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)],
        today: Annotated[datetime.date, Depends(current_day)]
    ):
        """
        Aggregates every dashboard card. Branch failures are listed in
        'errors' and never fail the request; a partial summary carries no ETag.
        The tag is scoped to the day, which moves the payments window.
        """
        scope = today.isoformat()
        cached = not_modified(request, invalidator, PageRoute.DASHBOARD, scope=scope)
        if cached is not None:
            return cached
        etag = invalidator.etag(PageRoute.DASHBOARD, scope=scope)
        summary = await dashboard_service.summary(today)
        if not summary.errors:
            response.headers["ETag"] = etag
        return summary


dashboard_api = DashboardAPI()
router = dashboard_api.router
