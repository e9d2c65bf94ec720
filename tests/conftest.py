'''
Pytest configuration for the FastAPI application.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Giving every test its own SQLite database file with the full schema.
3. Seeding a small school (years, classes, families, fees, payments, accounts).
4. Providing instances of all service classes, pre-injected with a test db session.
5. Providing a FastAPI TestClient and auth headers for endpoint testing.
'''

import os

# Must happen before the settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./school_admin.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["TEST_MODE"] = "True"

import asyncio
import datetime
import decimal
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest

# --- FastAPI & Testing Imports ---
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# --- Constant Imports ----
from tests.constants import (
    TEST_ADMIN_EMAIL,
    TEST_PARENT_EMAIL,
    TEST_MOTHER_EMAIL,
    TEST_OTHER_PARENT_EMAIL,
    TEST_OTHER_PARENT_ACCOUNT_EMAIL,
    TEST_PHOTO_URL,
    TEST_NEW_PHOTO_URL,
)
from tests.database import factories

# --- Application Imports ---
from src.school_admin_backend.main import app
from src.school_admin_backend.common.config import settings
from src.school_admin_backend.core.invalidation import RouteInvalidator, get_route_invalidator
from src.school_admin_backend.database import engine as db_engine
from src.school_admin_backend.database import models as db_models
from src.school_admin_backend.database.db_enums import PaymentStatusEnum
from src.school_admin_backend.services.class_service import ClassService
from src.school_admin_backend.services.enrollment_service import EnrollmentService
from src.school_admin_backend.services.fee_service import FeeService
from src.school_admin_backend.services.mail_service import MailService, get_mail_service
from src.school_admin_backend.services.media_service import MediaHostService, get_media_host
from src.school_admin_backend.services.notification_service import NotificationService
from src.school_admin_backend.services.option_service import OptionService
from src.school_admin_backend.services.parent_service import ParentService
from src.school_admin_backend.services.payment_service import PaymentService
from src.school_admin_backend.services.school_year_service import SchoolYearService
from src.school_admin_backend.services.security import JWTHandler
from src.school_admin_backend.services.student_service import StudentService
from src.school_admin_backend.services.user_service import UserService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio' (solves 'trio' error).
    2. Promotes the scope to 'session' (solves 'ScopeMismatch').
    """
    return "asyncio"


# --- 1. Database fixtures ---

@pytest.fixture(scope="function")
def test_db_url(tmp_path, monkeypatch) -> str:
    """A fresh SQLite file per test; TEST_MODE makes the engine pick it up."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'school.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL_TEST", url)
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."
    return url


@pytest.fixture(scope="function")
async def database(test_db_url: str) -> AsyncGenerator[None, None]:
    """Creates the app's engine on the test database and the whole schema."""
    db_engine.create_db_engine_and_session_factory()
    await db_engine.init_models()
    yield
    await db_engine.dispose_db_engine()


@pytest.fixture(scope="function")
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """
    The session handed to the services under test.
    The factories add their rows to this same session.
    """
    session = db_engine.AsyncSessionLocal()
    factories.test_db_session = session
    try:
        yield session
    finally:
        factories.test_db_session = None
        await session.rollback()
        await session.close()


@pytest.fixture(scope="function")
def session_factory(database) -> async_sessionmaker[AsyncSession]:
    return db_engine.get_session_factory()


# --- 2. Seed data ---

async def seed_school(session: AsyncSession) -> SimpleNamespace:
    """
    A small school:
    - two school years, one option, one class
    - the Kabila family (two e-mails, one child enrolled, with a photo)
    - the Mbuyi family (one child) and a student without parent
    - one fee, four payments (two pending), three notifications
    - an admin account and a portal account for each family
    """
    factories.test_db_session = session
    year_old = factories.SchoolYearFactory(
        libelle="2022-2023", datedebut=datetime.date(2022, 9, 1), datefin=datetime.date(2023, 7, 1)
    )
    year = factories.SchoolYearFactory(
        libelle="2023-2024", datedebut=datetime.date(2023, 9, 1), datefin=datetime.date(2024, 7, 1)
    )
    option = factories.OptionFactory(nomoption="Scientifique", abreviation="SC")
    parent = factories.ParentFactory(
        nompere="Kabila", nommere="Mutombo", emailpere=TEST_PARENT_EMAIL, emailmere=TEST_MOTHER_EMAIL
    )
    other_parent = factories.ParentFactory(nompere="Mbuyi", nommere="Ilunga", emailpere=TEST_OTHER_PARENT_EMAIL)
    await session.flush()

    classe = factories.ClassFactory(nomclasse="6e Scientifique", niveau="6", idoption=option.idoption)
    child = factories.StudentFactory(
        nom="Kabila", postnom="Tshibanda", prenom="Joseph", idparent=parent.idparent, photo=TEST_PHOTO_URL
    )
    other_child = factories.StudentFactory(nom="Mbuyi", postnom="Kalala", idparent=other_parent.idparent)
    orphan = factories.StudentFactory(nom="Zola", postnom="Nsimba", idparent=None)
    fee = factories.FeeFactory(
        description="Minerval 2023-2024", montanttotal=decimal.Decimal("300.00"), idanneescolaire=year.idanneescolaire
    )
    await session.flush()

    enrollment = factories.EnrollmentFactory(
        ideleve=child.ideleve,
        idclasse=classe.idclasse,
        idanneescolaire=year.idanneescolaire,
        dateinscription=datetime.datetime(2024, 1, 10, 9, 0)
    )
    payments = [
        factories.PaymentFactory(
            montantpayer=decimal.Decimal("100.00"), status=PaymentStatusEnum.SUCCESS.value,
            datepaiement=datetime.datetime(2024, 2, 10, 10, 0), ideleve=child.ideleve, idfrais=fee.idfrais
        ),
        factories.PaymentFactory(
            montantpayer=decimal.Decimal("50.00"), status=PaymentStatusEnum.PENDING.value,
            datepaiement=datetime.datetime(2024, 3, 5, 10, 0), ideleve=child.ideleve, idfrais=fee.idfrais
        ),
        factories.PaymentFactory(
            montantpayer=decimal.Decimal("75.50"), status=PaymentStatusEnum.PENDING.value,
            datepaiement=datetime.datetime(2023, 11, 20, 10, 0), ideleve=other_child.ideleve, idfrais=fee.idfrais
        ),
        factories.PaymentFactory(
            montantpayer=decimal.Decimal("20.00"), status=PaymentStatusEnum.SUCCESS.value,
            datepaiement=datetime.datetime(2024, 3, 20, 10, 0), ideleve=orphan.ideleve
        ),
    ]
    notifications = [
        factories.NotificationFactory(
            message="Réunion des parents de 6e", idparent=parent.idparent,
            dateenvoi=datetime.datetime(2024, 3, 1, 8, 0)
        ),
        factories.NotificationFactory(
            message="Congé scolaire le 30 juin", idparent=None,
            dateenvoi=datetime.datetime(2024, 3, 2, 8, 0)
        ),
        factories.NotificationFactory(
            message="Rappel du minerval impayé", idparent=other_parent.idparent,
            dateenvoi=datetime.datetime(2024, 3, 3, 8, 0)
        ),
    ]
    admin = factories.AdminUserFactory(email=TEST_ADMIN_EMAIL)
    parent_user = factories.ParentUserFactory(email=TEST_PARENT_EMAIL, idparent=parent.idparent)
    other_parent_user = factories.ParentUserFactory(
        email=TEST_OTHER_PARENT_ACCOUNT_EMAIL, idparent=other_parent.idparent
    )
    await session.flush()
    await session.commit()

    return SimpleNamespace(
        year_old=year_old, year=year, option=option, classe=classe,
        parent=parent, other_parent=other_parent,
        child=child, other_child=other_child, orphan=orphan,
        fee=fee, enrollment=enrollment, payments=payments, notifications=notifications,
        admin=admin, parent_user=parent_user, other_parent_user=other_parent_user
    )


@pytest.fixture(scope="function")
async def seeded(db_session: AsyncSession) -> SimpleNamespace:
    """The seeded school, written through the test session."""
    return await seed_school(db_session)


def seed_database_file(url: str) -> SimpleNamespace:
    """
    Creates the schema and seeds it with a throwaway engine, before the
    TestClient's own engine is started on the same file.
    """
    async def run() -> SimpleNamespace:
        engine = create_async_engine(url)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(db_models.Base.metadata.create_all)
            async with async_sessionmaker(engine, expire_on_commit=False)() as session:
                school = await seed_school(session)
        finally:
            factories.test_db_session = None
            await engine.dispose()
        return school

    return asyncio.run(run())


# --- 3. Service fixtures ---

@pytest.fixture(scope="function")
def invalidator() -> RouteInvalidator:
    """A private invalidator so page versions start at 0 in every test."""
    return RouteInvalidator()


@pytest.fixture(scope="function")
def mock_media_host() -> MediaHostService:
    """Provides a mock MediaHostService instance (no network, no credentials)."""
    mock_service = MagicMock(spec=MediaHostService)
    mock_service.upload = AsyncMock(return_value=TEST_NEW_PHOTO_URL)
    mock_service.delete = AsyncMock(return_value=None)
    mock_service.delete_by_url = AsyncMock(return_value=True)
    return mock_service


@pytest.fixture(scope="function")
def mock_mail_service() -> MailService:
    """Provides a mock MailService; the tokens it was given are in its call args."""
    mock_service = MagicMock(spec=MailService)
    mock_service.send_confirmation = AsyncMock(return_value=True)
    mock_service.send_password_reset = AsyncMock(return_value=True)
    return mock_service


@pytest.fixture(scope="function")
def school_year_service(
db_session: AsyncSession, invalidator: RouteInvalidator) -> SchoolYearService:
    return SchoolYearService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def option_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> OptionService:
    return OptionService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def class_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> ClassService:
    return ClassService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def parent_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> ParentService:
    return ParentService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def student_service(
    db_session: AsyncSession,
    invalidator: RouteInvalidator,
    mock_media_host: MediaHostService
) -> StudentService:
    return StudentService(db=db_session, invalidator=invalidator, media=mock_media_host)

@pytest.fixture(scope="function")
def fee_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> FeeService:
    return FeeService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def enrollment_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> EnrollmentService:
    return EnrollmentService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def payment_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> PaymentService:
    return PaymentService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def notification_service(db_session: AsyncSession, invalidator: RouteInvalidator) -> NotificationService:
    return NotificationService(db=db_session, invalidator=invalidator)

@pytest.fixture(scope="function")
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db=db_session)


# --- 4. API fixtures ---

@pytest.fixture(scope="function")
def api_school(test_db_url: str) -> SimpleNamespace:
    return seed_database_file(test_db_url)


@pytest.fixture(scope="function")
def client(
    api_school: SimpleNamespace,
    invalidator: RouteInvalidator,
    mock_media_host: MediaHostService,
    mock_mail_service: MailService
) -> TestClient:
    """
    The core fixture for endpoint tests.

    1. The database file is already seeded (api_school).
    2. Running the app's lifespan creates the *real* engine on that file.
    3. The media host, the mail service and the page invalidator are replaced per test.
    """
    app.dependency_overrides[get_media_host] = lambda: mock_media_host
    app.dependency_overrides[get_mail_service] = lambda: mock_mail_service
    app.dependency_overrides[get_route_invalidator] = lambda: invalidator

    # This 'with' block runs the app's startup lifespan,
    # which creates the engine and session factory.
    with TestClient(app) as test_client:
        yield test_client

    # The app's shutdown lifespan runs here, and we clear the overrides.
    app.dependency_overrides.clear()


def auth_headers_for(email: str, role: str) -> dict[str, str]:
    """Helper to create auth headers for a given account."""
    token = JWTHandler.create_access_token(subject=email, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def admin_headers(api_school: SimpleNamespace) -> dict[str, str]:
    return auth_headers_for(api_school.admin.email, api_school.admin.role)


@pytest.fixture(scope="function")
def parent_headers(api_school: SimpleNamespace) -> dict[str, str]:
    return auth_headers_for(api_school.parent_user.email, api_school.parent_user.role)


@pytest.fixture(scope="function")
def other_parent_headers(api_school: SimpleNamespace) -> dict[str, str]:
    return auth_headers_for(api_school.other_parent_user.email, api_school.other_parent_user.role)
