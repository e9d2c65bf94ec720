'''
Access functions for students (élèves), including their photo.
'''
from typing import Annotated, Any, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from ..common.exceptions import MediaHostError
from ..common.logger import log
from ..core.invalidation import Entity, RouteInvalidator, get_route_invalidator
from ..database import models as db_models
from ..database.engine import get_db_session
from ..models.academics import ClassRead
from ..models.envelope import ErrorCode, Result
from ..models.families import ChildRead, StudentCreate, StudentRead, StudentUpdate
from .base_service import CrudService, EntityLabels
from .media_service import MediaHostService, get_media_host
from .photo_sidecar import PhotoSidecar


class StudentService(CrudService[StudentRead]):
    model = db_models.Eleve
    read_model = StudentRead
    entity = Entity.STUDENT
    labels = EntityLabels(
        of_one="de l'élève",
        of_many="des élèves",
        not_found="Élève non trouvé."
    )
    order_by = (db_models.Eleve.nom, db_models.Eleve.ideleve)

    def __init__(
        self,
        db: Annotated[AsyncSession, Depends(get_db_session)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)],
        media: Annotated[MediaHostService, Depends(get_media_host)]
    ):
        super().__init__(db, invalidator)
        self.photos = PhotoSidecar(media)

    def load_options(self) -> list:
        return [joinedload(db_models.Eleve.parent)]

    async def create(self, data: StudentCreate, photo: Optional[bytes] = None) -> Result[StudentRead]:
        """
        Uploads the photo first (an upload failure aborts before any insert),
        then inserts the row; a failed insert deletes the uploaded photo.
        """
        log.info(f"Creating student '{data.nom} {data.postnom}' (photo: {bool(photo)}).")
        values = data.model_dump()
        photo_url = None
        if photo:
            try:
                photo_url = await self.photos.upload(photo)
            except MediaHostError as e:
                return Result.fail(f"Échec de l'upload de la photo: {e}", ErrorCode.REMOTE_FAILURE)
            values["photo"] = photo_url

        result = await self._create(values)
        if not result.success and photo_url:
            await self.photos.compensate(photo_url)
        return result

    async def update(
        self,
        key: Any,
        data: StudentUpdate,
        photo: Optional[bytes] = None,
        delete_existing_photo: bool = False
    ) -> Result[StudentRead]:
        """
        A new photo replaces the current one (the old asset is deleted once the
        row points to the new one); 'delete_existing_photo' removes the current
        photo and clears the column; otherwise the photo is left untouched.
        """
        log.info(f"Updating student {key} (new photo: {bool(photo)}, delete photo: {delete_existing_photo}).")
        current = await self.get_by_id(key)
        if not current.success:
            return current
        old_url = current.data.photo

        values = data.model_dump(exclude_unset=True)
        values.pop("photo", None)
        new_url = None
        if photo:
            try:
                new_url = await self.photos.upload(photo)
            except MediaHostError as e:
                return Result.fail(f"Échec de l'upload de la photo: {e}", ErrorCode.REMOTE_FAILURE)
            values["photo"] = new_url
        elif delete_existing_photo:
            try:
                await self.photos.remove_existing(old_url)
            except MediaHostError as e:
                return Result.fail(f"Échec de la suppression de la photo existante: {e}", ErrorCode.REMOTE_FAILURE)
            values["photo"] = None

        result = await self._update(key, values)
        if not result.success:
            if new_url:
                await self.photos.compensate(new_url)
            return result
        if new_url and old_url:
            await self.photos.release(old_url)
        return result

    async def delete(self, key: Any) -> Result[None]:
        """Deletes the row, then its photo; a photo left behind is only a warning."""
        current = await self.get_by_id(key)
        if not current.success:
            return Result.fail(current.error, current.code)
        result = await super().delete(key)
        if result.success:
            await self.photos.release(current.data.photo)
        return result

    async def list_for_parent(self, idparent: int) -> Result[list[ChildRead]]:
        """
        The children of a parent, each with the class (and option) of their
        first enrollment.
        """
        log.info(f"Fetching the children of parent {idparent}.")

        async def operation():
            stmt = (
                self._select()
                .options(
                    selectinload(db_models.Eleve.inscriptions)
                    .joinedload(db_models.Inscription.classe)
                    .joinedload(db_models.Classe.option)
                )
                .where(db_models.Eleve.idparent == idparent)
                .order_by(*self.order_by)
            )
            result = await self.db.execute(stmt)
            children = []
            for eleve in result.unique().scalars().all():
                first = eleve.inscriptions[0] if eleve.inscriptions else None
                student = self.to_read(eleve).model_dump(exclude={"parent_name"})
                children.append(ChildRead(
                    **student,
                    classe=ClassRead.model_validate(first.classe) if first else None
                ))
            return Result.ok(children)

        return await self._guard("de la récupération des élèves du parent", operation)
