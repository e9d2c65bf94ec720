'''
Generic access functions shared by every entity service.

Each public method issues its query, reshapes the rows into the entity's read
model and returns a Result envelope. Failures never escape: they are logged,
the session is rolled back and the envelope carries the French message shown
to the user.
'''
import builtins
from typing import Annotated, Any, Awaitable, Callable, Generic, NamedTuple, TypeVar

from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.exc import DBAPIError, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.logger import log
from ..core.invalidation import Entity, RouteInvalidator, get_route_invalidator
from ..database.engine import get_db_session
from ..models.envelope import CountResult, ErrorCode, Result

ReadT = TypeVar("ReadT", bound=BaseModel)

INVALID_UPDATE = "Veuillez corriger les champs du formulaire."


class EntityLabels(NamedTuple):
    """French wording used to build the envelope messages of an entity."""
    of_one: str     # "de l'année scolaire"
    of_many: str    # "des années scolaires"
    not_found: str  # "Année scolaire non trouvée."


def driver_message(error: SQLAlchemyError) -> str:
    """The database's own message, without SQLAlchemy's statement dump."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class CrudService(Generic[ReadT]):
    """
    Base class of the entity services.
    Subclasses declare the ORM model, the read model, the eager-load options
    and the list ordering; the five access functions come from here.
    """
    model: type = None
    read_model: type[ReadT] = None
    entity: Entity = None
    labels: EntityLabels = None
    order_by: tuple = ()

    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        self.db = db
        self.invalidator = invalidator

    # --- Query building ---

    def load_options(self) -> list:
        """Eager-load options for the relations the read model shows."""
        return []

    def _select(self):
        return select(self.model).options(*self.load_options())

    def _key_clause(self, key: Any) -> list:
        values = tuple(key) if isinstance(key, tuple) else (key,)
        columns = sa_inspect(self.model).primary_key
        if len(values) != len(columns):
            raise ValueError(f"Expected {len(columns)} key value(s) for '{self.model.__tablename__}', got {len(values)}.")
        return [column == value for column, value in zip(columns, values)]

    def _key_of(self, instance) -> Any:
        identity = sa_inspect(instance).identity
        return identity[0] if len(identity) == 1 else tuple(identity)

    def to_read(self, instance) -> ReadT:
        return self.read_model.model_validate(instance)

    async def _fetch_one(self, key: Any):
        """Exactly one fully loaded row; raises NoResultFound otherwise."""
        stmt = (
            self._select()
            .where(*self._key_clause(key))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.unique().scalar_one()

    # --- Envelope handling ---

    def _actions(self) -> dict[str, str]:
        return {
            "list": f"de la récupération {self.labels.of_many}",
            "get": f"de la récupération {self.labels.of_one}",
            "create": f"de l'ajout {self.labels.of_one}",
            "update": f"de la mise à jour {self.labels.of_one}",
            "delete": f"de la suppression {self.labels.of_one}",
            "count": f"du comptage {self.labels.of_many}",
        }

    async def _guard(self, action: str, operation: Callable[[], Awaitable[Result]]) -> Result:
        """
        Runs 'operation' and converts its failures into envelopes:
        missing row -> not_found, database error -> remote_failure,
        anything else -> exception.
        """
        try:
            return await operation()
        except NoResultFound:
            await self.db.rollback()
            log.warning(f"{self.model.__tablename__}: {self.labels.not_found}")
            return Result.fail(self.labels.not_found, ErrorCode.NOT_FOUND)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error(f"Database error during '{action}': {e}", exc_info=True)
            return Result.fail(f"Erreur lors {action} : {driver_message(e)}", ErrorCode.REMOTE_FAILURE)
        except Exception as e:
            await self.db.rollback()
            log.error(f"Unexpected error during '{action}': {e}", exc_info=True)
            return Result.fail(f"Exception lors {action} : {e}", ErrorCode.EXCEPTION)

    def _broadcast(self):
        self.invalidator.invalidate(self.entity)

    # --- Access functions ---

    async def list(self, **filters) -> Result[list[ReadT]]:
        """All rows, joined and ordered; None-valued filters are ignored."""
        log.info(f"Fetching {self.model.__tablename__} list with filters {filters}.")

        async def operation():
            stmt = self._select().order_by(*self.order_by)
            active = {name: value for name, value in filters.items() if value is not None}
            if active:
                stmt = stmt.filter_by(**active)
            result = await self.db.execute(stmt)
            return Result.ok([self.to_read(row) for row in result.unique().scalars().all()])

        return await self._guard(self._actions()["list"], operation)

    async def get_by_id(self, key: Any) -> Result[ReadT]:
        log.info(f"Fetching {self.model.__tablename__} {key}.")

        async def operation():
            return Result.ok(self.to_read(await self._fetch_one(key)))

        return await self._guard(self._actions()["get"], operation)

    async def create(self, data: BaseModel) -> Result[ReadT]:
        log.info(f"Creating {self.model.__tablename__} row.")
        return await self._create(data.model_dump())

    async def _create(self, values: dict[str, Any]) -> Result[ReadT]:
        async def operation():
            instance = await self._insert(values)
            key = self._key_of(instance)
            await self.db.commit()
            created = await self._fetch_one(key)
            self._broadcast()
            return Result.ok(self.to_read(created))

        return await self._guard(self._actions()["create"], operation)

    async def update(self, key: Any, data: BaseModel) -> Result[ReadT]:
        """Changes only the fields present in 'data'; an empty update returns the row as is."""
        log.info(f"Updating {self.model.__tablename__} {key}.")
        return await self._update(key, data.model_dump(exclude_unset=True))

    async def _update(self, key: Any, values: dict[str, Any]) -> Result[ReadT]:
        async def operation():
            instance = await self._fetch_one(key)
            if not values:
                return Result.ok(self.to_read(instance))
            field_errors = self.check_update(instance, values)
            if field_errors:
                log.warning(f"{self.model.__tablename__} {key} update rejected: {field_errors}")
                return Result.invalid(INVALID_UPDATE, field_errors)
            await self._apply(instance, values)
            await self.db.commit()
            updated = await self._fetch_one(key)
            self._broadcast()
            return Result.ok(self.to_read(updated))

        return await self._guard(self._actions()["update"], operation)

    async def delete(self, key: Any) -> Result[None]:
        log.info(f"Deleting {self.model.__tablename__} {key}.")

        async def operation():
            instance = await self._fetch_one(key)
            await self.db.delete(instance)
            await self.db.flush()
            await self.db.commit()
            self._broadcast()
            return Result.ok()

        return await self._guard(self._actions()["delete"], operation)

    async def count(self) -> CountResult:
        log.info(f"Counting {self.model.__tablename__} rows.")
        try:
            result = await self.db.execute(select(func.count()).select_from(self.model))
            return CountResult(count=result.scalar_one(), success=True)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error(f"Database error while counting {self.model.__tablename__}: {e}", exc_info=True)
            return CountResult(
                error=f"Erreur lors {self._actions()['count']} : {driver_message(e)}",
                success=False,
                code=ErrorCode.REMOTE_FAILURE
            )
        except Exception as e:
            await self.db.rollback()
            log.error(f"Error while counting {self.model.__tablename__}: {e}", exc_info=True)
            return CountResult(
                error=f"Exception lors {self._actions()['count']} : {e}",
                success=False,
                code=ErrorCode.EXCEPTION
            )

    def check_update(self, instance, values: dict[str, Any]) -> dict[str, builtins.list[str]]:
        """
        Rules spanning a stored field and a submitted one, checked against
        the row merged with 'values'. Returns the per-field errors.
        """
        return {}

    # --- Write helpers (overridden where a write needs more than the columns) ---

    async def _insert(self, values: dict[str, Any]):
        instance = self.model(**values)
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def _apply(self, instance, values: dict[str, Any]):
        for name, value in values.items():
            setattr(instance, name, value)
        await self.db.flush()
