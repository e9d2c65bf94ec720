'''
Page invalidation after mutations.

Every entity declares which pages display it (its own list page, the pages
that show it joined, the dashboard when it feeds a card). A successful
create/update/delete bumps the version of each of those pages; list
endpoints expose the version as an ETag so clients re-fetch stale pages.
'''
import enum
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from ..common.logger import log


class PageRoute(str, enum.Enum):
    DASHBOARD = "/dashboard"
    SCHOOL_YEARS = "/dashboard/anneescolaires"
    CLASSES = "/dashboard/classes"
    STUDENTS = "/dashboard/eleves"
    FEES = "/dashboard/frais"
    ENROLLMENTS = "/dashboard/inscriptions"
    NOTIFICATIONS = "/dashboard/notifications"
    OPTIONS = "/dashboard/options"
    PAYMENTS = "/dashboard/paiements"
    PARENTS = "/dashboard/parents"
    PORTAL = "/parents"
    PORTAL_NOTIFICATIONS = "/parents/notifications"
    PORTAL_PAYMENTS = "/parents/paiements"


class Entity(str, enum.Enum):
    """Entities of the school domain, valued by their table name."""
    SCHOOL_YEAR = "anneescolaire"
    OPTION = "option"
    CLASS = "classe"
    PARENT = "parent"
    STUDENT = "eleve"
    FEE = "frais"
    ENROLLMENT = "inscription"
    PAYMENT = "paiement"
    NOTIFICATION = "notification"


ROUTE_DEPENDENCIES: dict[Entity, tuple[PageRoute, ...]] = {
    Entity.SCHOOL_YEAR: (PageRoute.SCHOOL_YEARS, PageRoute.FEES, PageRoute.ENROLLMENTS, PageRoute.DASHBOARD),
    Entity.OPTION: (PageRoute.OPTIONS, PageRoute.CLASSES, PageRoute.ENROLLMENTS, PageRoute.DASHBOARD, PageRoute.PORTAL),
    Entity.CLASS: (PageRoute.CLASSES, PageRoute.ENROLLMENTS, PageRoute.DASHBOARD, PageRoute.PORTAL),
    Entity.PARENT: (PageRoute.PARENTS, PageRoute.STUDENTS, PageRoute.NOTIFICATIONS, PageRoute.PORTAL),
    Entity.STUDENT: (
        PageRoute.STUDENTS, PageRoute.ENROLLMENTS, PageRoute.PAYMENTS,
        PageRoute.DASHBOARD, PageRoute.PORTAL, PageRoute.PORTAL_PAYMENTS
    ),
    Entity.FEE: (PageRoute.FEES, PageRoute.PAYMENTS, PageRoute.PORTAL_PAYMENTS),
    Entity.ENROLLMENT: (PageRoute.ENROLLMENTS, PageRoute.DASHBOARD, PageRoute.PORTAL),
    Entity.PAYMENT: (PageRoute.PAYMENTS, PageRoute.DASHBOARD, PageRoute.PORTAL_PAYMENTS),
    Entity.NOTIFICATION: (PageRoute.NOTIFICATIONS, PageRoute.PORTAL_NOTIFICATIONS),
}


class RouteInvalidator:
    """
    Keeps a version counter per page route.
    Versions are per process: every ETag carries the boot id of the
    invalidator that issued it.
    """
    def __init__(self, dependencies: dict[Entity, tuple[PageRoute, ...]] = ROUTE_DEPENDENCIES):
        self.dependencies = dependencies
        self.boot_id = uuid4().hex[:12]
        self._versions: dict[PageRoute, int] = {route: 0 for route in PageRoute}
        self._stale_since: dict[PageRoute, datetime] = {}

    def invalidate(self, entity: Entity) -> tuple[PageRoute, ...]:
        """Marks every page depending on 'entity' as stale and returns them."""
        routes = self.dependencies.get(entity, ())
        now = datetime.now(timezone.utc)
        for route in routes:
            self._versions[route] += 1
            self._stale_since[route] = now
        log.info(f"Invalidated {len(routes)} page(s) after a change on '{entity.value}': {[r.value for r in routes]}")
        return routes

    def version(self, route: PageRoute) -> int:
        return self._versions[route]

    def stale_since(self, route: PageRoute) -> datetime | None:
        return self._stale_since.get(route)

    def etag(self, route: PageRoute, scope: Optional[str] = None) -> str:
        """
        Weak ETag of a page. 'scope' separates copies of the same page that
        hold different data (one per parent, one per dashboard window).
        """
        parts = [route.name.lower(), self.boot_id]
        if scope is not None:
            parts.append(scope)
        parts.append(str(self._versions[route]))
        return f'W/"{"-".join(parts)}"'


# Create a single, importable invalidator for the whole process
route_invalidator = RouteInvalidator()

def get_route_invalidator() -> RouteInvalidator:
    """FastAPI dependency returning the process-wide invalidator."""
    return route_invalidator
