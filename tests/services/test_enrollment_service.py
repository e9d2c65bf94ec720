import datetime
from types import SimpleNamespace

import pytest

from src.school_admin_backend.core.invalidation import PageRoute, RouteInvalidator
from src.school_admin_backend.models.enrollments import EnrollmentCreate, EnrollmentKey, EnrollmentUpdate
from src.school_admin_backend.models.envelope import ErrorCode
from src.school_admin_backend.services.enrollment_service import EnrollmentService


def key_of(school: SimpleNamespace) -> EnrollmentKey:
    return EnrollmentKey(school.child.ideleve, school.classe.idclasse, school.year.idanneescolaire)


@pytest.mark.anyio
class TestEnrollmentService:

    async def test_get_by_composite_key(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        result = await enrollment_service.get_by_id(key_of(seeded))

        assert result.success is True
        assert result.data.eleve.nom == "Kabila"
        assert result.data.classe.option.nomoption == "Scientifique"
        assert result.data.anneescolaire.libelle == "2023-2024"

    async def test_partial_key_is_an_exception(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        result = await enrollment_service.get_by_id((seeded.child.ideleve, seeded.classe.idclasse))

        assert result.success is False
        assert result.code == ErrorCode.EXCEPTION
        assert result.error.startswith("Exception lors de la récupération de l'inscription : ")

    async def test_create_sets_enrollment_date(
        self,
        enrollment_service: EnrollmentService,
        invalidator: RouteInvalidator,
        seeded: SimpleNamespace
    ):
        result = await enrollment_service.create(EnrollmentCreate(
            ideleve=seeded.orphan.ideleve,
            idclasse=seeded.classe.idclasse,
            idanneescolaire=seeded.year.idanneescolaire
        ))

        assert result.success is True
        assert result.data.dateinscription is not None
        assert result.data.eleve.nom == "Zola"
        assert invalidator.version(PageRoute.ENROLLMENTS) == 1
        assert invalidator.version(PageRoute.DASHBOARD) == 1

    async def test_duplicate_enrollment_is_remote_failure(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        key = key_of(seeded)

        result = await enrollment_service.create(EnrollmentCreate(**key._asdict()))

        assert result.success is False
        assert result.code == ErrorCode.REMOTE_FAILURE
        assert result.error.startswith("Erreur lors de l'ajout de l'inscription : ")

    async def test_update_enrollment_date(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        new_date = datetime.datetime(2024, 2, 1, 8, 30)

        result = await enrollment_service.update(key_of(seeded), EnrollmentUpdate(dateinscription=new_date))

        assert result.success is True
        assert result.data.dateinscription.replace(tzinfo=None) == new_date

    async def test_delete_by_composite_key(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        key = key_of(seeded)

        result = await enrollment_service.delete(key)

        assert result.success is True
        assert (await enrollment_service.get_by_id(key)).code == ErrorCode.NOT_FOUND

    async def test_recent_is_limited_and_newest_first(self, enrollment_service: EnrollmentService, seeded: SimpleNamespace):
        await enrollment_service.create(EnrollmentCreate(
            ideleve=seeded.other_child.ideleve,
            idclasse=seeded.classe.idclasse,
            idanneescolaire=seeded.year.idanneescolaire
        ))

        result = await enrollment_service.recent(1)

        (latest,) = result.data
        assert latest.eleve.nom == "Mbuyi"
