'''
Dashboard routes for students.
The add/edit forms are multipart: the student fields, an optional
'photoFile' and, on edit, an optional 'deleteExistingPhoto' flag.
'''
from typing import Annotated, Any, Optional

from fastapi import Depends, Request, status
from starlette.datastructures import UploadFile as StarletteUploadFile

from ..core.forms import FormController, FormMessages
from ..core.invalidation import PageRoute
from ..models.families import StudentCreate, StudentUpdate
from ..services.student_service import StudentService
from .base import CrudRoutes, form_response

PHOTO_FIELD = "photoFile"
DELETE_PHOTO_FIELD = "deleteExistingPhoto"


def is_checked(value: Any) -> bool:
    return str(value).strip().lower() in ("true", "1", "on", "yes")


async def read_student_form(request: Request) -> tuple[dict[str, Any], Optional[bytes], bool]:
    """Splits the multipart form into the student fields, the photo bytes and the delete flag."""
    form = await request.form()
    raw: dict[str, Any] = {}
    photo: Optional[bytes] = None
    for name, value in form.multi_items():
        if name == PHOTO_FIELD:
            if isinstance(value, StarletteUploadFile) and value.filename:
                photo = await value.read() or None
            continue
        raw[name] = value
    delete_existing = is_checked(raw.pop(DELETE_PHOTO_FIELD, False))
    return raw, photo, delete_existing


class StudentRoutes(CrudRoutes):
    def _register_form_routes(self):
        Service = Annotated[StudentService, Depends(StudentService)]

        async def add_item(request: Request, service: Service):
            raw, photo, _ = await read_student_form(request)
            controller = FormController(
                schema=StudentCreate,
                list_route=self.list_route,
                create=lambda model: service.create(model, photo=photo),
                messages=self.messages
            )
            return form_response(await controller.submit(raw), success_status=status.HTTP_201_CREATED)

        async def edit_item(item_id: int, request: Request, service: Service):
            raw, photo, delete_existing = await read_student_form(request)
            controller = FormController(
                schema=StudentUpdate,
                list_route=self.list_route,
                create=service.create,
                update=lambda key, model: service.update(
                    key, model, photo=photo, delete_existing_photo=delete_existing
                ),
                key=item_id,
                messages=self.messages
            )
            return form_response(await controller.submit(raw))

        self.router.add_api_route("/add", add_item, methods=["POST"], status_code=status.HTTP_201_CREATED, summary="Add")
        self.router.add_api_route("/{item_id}/edit", edit_item, methods=["POST"], summary="Edit")


students_routes = StudentRoutes(
    segment="eleves",
    tag="Students",
    service_cls=StudentService,
    create_model=StudentCreate,
    update_model=StudentUpdate,
    list_route=PageRoute.STUDENTS,
    messages=FormMessages(
        created="Élève ajouté avec succès !",
        updated="Élève mis à jour avec succès !"
    )
)
router = students_routes.router
