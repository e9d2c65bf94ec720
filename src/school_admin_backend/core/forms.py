'''
Form submission: validate the raw form, call the access function, and tell
the caller what to show and where to go next.
'''
import enum
from typing import Any, Awaitable, Callable, NamedTuple, Optional

from pydantic import BaseModel, Field, ValidationError

from ..common.logger import log
from ..models.envelope import ErrorCode, Result
from ..models.ui import Toast, ToastLevel
from .invalidation import PageRoute


class FormState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"


class FormMessages(NamedTuple):
    created: str = "Enregistrement ajouté avec succès !"
    updated: str = "Enregistrement mis à jour avec succès !"


class FormOutcome(BaseModel):
    success: bool
    state: FormState
    toast: Toast
    redirect_to: Optional[str] = None
    refresh: bool = False
    field_errors: dict[str, list[str]] = Field(default_factory=dict)
    code: Optional[ErrorCode] = None
    data: Any = None


def collect_field_errors(error: ValidationError) -> dict[str, list[str]]:
    """Groups pydantic errors by the form field they belong to."""
    errors: dict[str, list[str]] = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "__all__"
        errors.setdefault(field, []).append(item["msg"])
    return errors


class FormController:
    """
    Binds a form schema to an entity's create (and optionally update) access
    function. Bound to a key it edits that record, otherwise it creates one.

    State goes idle -> submitting -> success, or back to idle when the
    validation or the remote call fails.
    """
    def __init__(
        self,
        schema: type[BaseModel],
        list_route: PageRoute,
        create: Callable[[BaseModel], Awaitable[Result]],
        update: Optional[Callable[[Any, BaseModel], Awaitable[Result]]] = None,
        key: Any = None,
        messages: FormMessages = FormMessages()
    ):
        if key is not None and update is None:
            raise ValueError("An update function is required to edit an existing record.")
        self.schema = schema
        self.list_route = list_route
        self.create = create
        self.update = update
        self.key = key
        self.messages = messages
        self.state = FormState.IDLE

    @property
    def editing(self) -> bool:
        return self.key is not None

    def _title(self, success: bool) -> str:
        kind = "de mise à jour" if self.editing else "d'ajout"
        return f"Succès {kind}" if success else f"Erreur {kind}"

    def _failure(
        self,
        description: str,
        field_errors: Optional[dict[str, list[str]]] = None,
        code: Optional[ErrorCode] = None
    ) -> FormOutcome:
        self.state = FormState.IDLE
        return FormOutcome(
            success=False,
            state=self.state,
            toast=Toast(level=ToastLevel.ERROR, title=self._title(False), description=description),
            field_errors=field_errors or {},
            code=code
        )

    async def submit(self, raw: dict[str, Any]) -> FormOutcome:
        if self.state == FormState.SUBMITTING:
            log.warning(f"Ignoring a second submission of the {self.schema.__name__} form while one is in flight.")
            return FormOutcome(
                success=False,
                state=self.state,
                toast=Toast(level=ToastLevel.WARNING, title=self._title(False), description="Envoi déjà en cours.")
            )

        try:
            model = self.schema.model_validate(raw)
        except ValidationError as e:
            field_errors = collect_field_errors(e)
            log.warning(f"{self.schema.__name__} form rejected: {field_errors}")
            return self._failure("Veuillez corriger les champs du formulaire.", field_errors)

        self.state = FormState.SUBMITTING
        try:
            if self.editing:
                result = await self.update(self.key, model)
            else:
                result = await self.create(model)
        except Exception:
            self.state = FormState.IDLE
            raise

        if not result.success:
            log.warning(f"{self.schema.__name__} form submission failed: {result.error}")
            return self._failure(
                result.error or "Une erreur est survenue.",
                field_errors=result.field_errors,
                code=result.code
            )

        self.state = FormState.SUCCESS
        return FormOutcome(
            success=True,
            state=self.state,
            toast=Toast(
                level=ToastLevel.SUCCESS,
                title=self._title(True),
                description=self.messages.updated if self.editing else self.messages.created
            ),
            redirect_to=self.list_route.value,
            refresh=True,
            data=result.data
        )
