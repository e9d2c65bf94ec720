'''
Dashboard routes for School years.
'''
from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.academics import SchoolYearCreate, SchoolYearUpdate
from ..services.school_year_service import SchoolYearService
from .base import CrudRoutes

school_years_routes = CrudRoutes(
    segment="anneescolaires",
    tag="School years",
    service_cls=SchoolYearService,
    create_model=SchoolYearCreate,
    update_model=SchoolYearUpdate,
    list_route=PageRoute.SCHOOL_YEARS,
    messages=FormMessages(
        created="Année scolaire ajoutée avec succès !",
        updated="Année scolaire mise à jour avec succès !"
    )
)
router = school_years_routes.router
