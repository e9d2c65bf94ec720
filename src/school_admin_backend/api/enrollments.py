'''
Dashboard routes for enrollments.
An enrollment is addressed by its three key columns in the path.
'''
from typing import Annotated, Any

from fastapi import Body, Depends

from ..core.forms import FormMessages
from ..core.invalidation import PageRoute
from ..models.enrollments import EnrollmentCreate, EnrollmentKey, EnrollmentUpdate
from ..services.enrollment_service import EnrollmentService
from .base import CrudRoutes

KEY_PATH = "/{ideleve}/{idclasse}/{idanneescolaire}"


class EnrollmentRoutes(CrudRoutes):
    def _register_form_routes(self):
        Service = Annotated[EnrollmentService, Depends(EnrollmentService)]

        async def add_item(payload: Annotated[dict[str, Any], Body()], service: Service):
            return await self.add_item(payload, service)

        async def edit_item(
            ideleve: int,
            idclasse: int,
            idanneescolaire: int,
            payload: Annotated[dict[str, Any], Body()],
            service: Service
        ):
            return await self.edit_item(EnrollmentKey(ideleve, idclasse, idanneescolaire), payload, service)

        self.router.add_api_route("/add", add_item, methods=["POST"], status_code=201, summary="Add")
        self.router.add_api_route(f"{KEY_PATH}/edit", edit_item, methods=["POST"], summary="Edit")

    def _register_key_routes(self):
        Service = Annotated[EnrollmentService, Depends(EnrollmentService)]

        async def get_item(ideleve: int, idclasse: int, idanneescolaire: int, service: Service):
            return await self.get_item(EnrollmentKey(ideleve, idclasse, idanneescolaire), service)

        async def delete_item(ideleve: int, idclasse: int, idanneescolaire: int, service: Service):
            return await self.delete_item(EnrollmentKey(ideleve, idclasse, idanneescolaire), service)

        self.router.add_api_route(KEY_PATH, get_item, methods=["GET"], summary="Get by key")
        self.router.add_api_route(KEY_PATH, delete_item, methods=["DELETE"], summary="Delete")


enrollments_routes = EnrollmentRoutes(
    segment="inscriptions",
    tag="Enrollments",
    service_cls=EnrollmentService,
    create_model=EnrollmentCreate,
    update_model=EnrollmentUpdate,
    list_route=PageRoute.ENROLLMENTS,
    messages=FormMessages(
        created="Inscription ajoutée avec succès !",
        updated="Inscription mise à jour avec succès !"
    )
)
router = enrollments_routes.router
