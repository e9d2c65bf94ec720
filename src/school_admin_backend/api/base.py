'''
Shared plumbing of the dashboard routers: envelope to HTTP status mapping,
page versions as ETags, and the generic CRUD + form routes of an entity.
'''
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.forms import FormController, FormMessages, FormOutcome
from ..core.invalidation import PageRoute, RouteInvalidator, get_route_invalidator
from ..models.envelope import ErrorCode, Result
from ..services.base_service import CrudService
from ..services.security import require_admin


def status_for(success: bool, code: Optional[ErrorCode], success_status: int = status.HTTP_200_OK) -> int:
    if success:
        return success_status
    if code == ErrorCode.NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    if code == ErrorCode.INVALID:
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_400_BAD_REQUEST


def envelope_response(result: BaseModel, success_status: int = status.HTTP_200_OK, headers: Optional[dict] = None) -> JSONResponse:
    """The envelope as the body, its outcome as the status code."""
    return JSONResponse(
        status_code=status_for(result.success, result.code, success_status),
        content=jsonable_encoder(result),
        headers=headers
    )


def form_response(outcome: FormOutcome, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    if not outcome.success and outcome.field_errors:
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        code = status_for(outcome.success, outcome.code, success_status)
    return JSONResponse(status_code=code, content=jsonable_encoder(outcome))


# Headers of pages whose content depends on the signed-in user
PRIVATE_PAGE_HEADERS = {"Vary": "Authorization", "Cache-Control": "private"}


def not_modified(
    request: Request,
    invalidator: RouteInvalidator,
    route: PageRoute,
    scope: Optional[str] = None,
    private: bool = False
) -> Optional[Response]:
    """304 when the client already holds the current version of the page."""
    etag = invalidator.etag(route, scope)
    if request.headers.get("if-none-match") == etag:
        headers = {"ETag": etag, **(PRIVATE_PAGE_HEADERS if private else {})}
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    return None


def page_response(
    invalidator: RouteInvalidator,
    route: PageRoute,
    result: Result,
    scope: Optional[str] = None,
    private: bool = False
) -> JSONResponse:
    headers = dict(PRIVATE_PAGE_HEADERS) if private else {}
    if result.success:
        headers["ETag"] = invalidator.etag(route, scope)
    return envelope_response(result, headers=headers or None)


class CrudRoutes:
    """
    The routes of one dashboard entity:
    GET '' (list), GET '/{id}', POST '/add', POST '/{id}/edit', DELETE '/{id}'.
    """
    def __init__(
        self,
        segment: str,
        tag: str,
        service_cls: type[CrudService],
        create_model: type[BaseModel],
        update_model: type[BaseModel],
        list_route: PageRoute,
        messages: FormMessages
    ):
        self.service_cls = service_cls
        self.create_model = create_model
        self.update_model = update_model
        self.list_route = list_route
        self.messages = messages
        self.router = APIRouter(
            prefix=f"/dashboard/{segment}",
            tags=[tag],
            dependencies=[Depends(require_admin)]
        )
        self._register_routes()

    def _register_routes(self):
        self._register_list_route()
        self._register_form_routes()
        self._register_key_routes()

    # --- Handlers shared by every entity ---

    async def list_items(self, request: Request, service: CrudService, invalidator: RouteInvalidator) -> Response:
        cached = not_modified(request, invalidator, self.list_route)
        if cached is not None:
            return cached
        return page_response(invalidator, self.list_route, await service.list())

    async def get_item(self, key: Any, service: CrudService) -> Response:
        return envelope_response(await service.get_by_id(key))

    async def add_item(self, payload: dict[str, Any], service: CrudService) -> Response:
        controller = FormController(
            schema=self.create_model,
            list_route=self.list_route,
            create=service.create,
            messages=self.messages
        )
        return form_response(await controller.submit(payload), success_status=status.HTTP_201_CREATED)

    async def edit_item(self, key: Any, payload: dict[str, Any], service: CrudService) -> Response:
        controller = FormController(
            schema=self.update_model,
            list_route=self.list_route,
            create=service.create,
            update=service.update,
            key=key,
            messages=self.messages
        )
        return form_response(await controller.submit(payload))

    async def delete_item(self, key: Any, service: CrudService) -> Response:
        return envelope_response(await service.delete(key))

    # --- Route registration ---

    def _register_list_route(self):
        Service = Annotated[self.service_cls, Depends(self.service_cls)]

        async def list_items(
            request: Request,
            service: Service,
            invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
        ):
            return await self.list_items(request, service, invalidator)

        self.router.add_api_route("", list_items, methods=["GET"], summary="List")

    def _register_form_routes(self):
        Service = Annotated[self.service_cls, Depends(self.service_cls)]

        async def add_item(payload: Annotated[dict[str, Any], Body()], service: Service):
            return await self.add_item(payload, service)

        async def edit_item(item_id: int, payload: Annotated[dict[str, Any], Body()], service: Service):
            return await self.edit_item(item_id, payload, service)

        self.router.add_api_route("/add", add_item, methods=["POST"], status_code=status.HTTP_201_CREATED, summary="Add")
        self.router.add_api_route("/{item_id}/edit", edit_item, methods=["POST"], summary="Edit")

    def _register_key_routes(self):
        Service = Annotated[self.service_cls, Depends(self.service_cls)]

        async def get_item(item_id: int, service: Service):
            return await self.get_item(item_id, service)

        async def delete_item(item_id: int, service: Service):
            return await self.delete_item(item_id, service)

        self.router.add_api_route("/{item_id}", get_item, methods=["GET"], summary="Get by id")
        self.router.add_api_route("/{item_id}", delete_item, methods=["DELETE"], summary="Delete")
