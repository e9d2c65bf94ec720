import datetime
import decimal

import factory
from factory.alchemy import SQLAlchemyModelFactory
from factory.faker import Faker

from src.school_admin_backend.database import models as db_models
from src.school_admin_backend.database.db_enums import (
    UserRole, SchoolYearStatusEnum, StudentStatusEnum, PaymentStatusEnum
)
from src.school_admin_backend.common.security_utils import HashedPassword
from tests.constants import TEST_PASSWORD_ADMIN, TEST_PASSWORD_PARENT

# Set by the fixtures before the factories are used.
# Rows are only added to the session; callers await session.flush() themselves.
test_db_session = None

class BaseFactory(SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_persistence = None

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        # This ensures the session is set before any factory is used
        if test_db_session is None:
            raise RuntimeError(
                "The 'test_db_session' global must be set by a fixture before using factories."
            )
        cls._meta.sqlalchemy_session = test_db_session
        return super()._create(model_class, *args, **kwargs)


class SchoolYearFactory(BaseFactory):
    libelle = factory.Sequence(lambda n: f"{2020 + n}-{2021 + n}")
    status = SchoolYearStatusEnum.ONGOING.value
    datedebut = factory.Sequence(lambda n: datetime.date(2020 + n, 9, 1))
    datefin = factory.Sequence(lambda n: datetime.date(2021 + n, 7, 1))

    class Meta:
        model = db_models.Anneescolaire

class OptionFactory(BaseFactory):
    nomoption = factory.Sequence(lambda n: f"Option {n}")
    abreviation = factory.Sequence(lambda n: f"O{n}")

    class Meta:
        model = db_models.Option

class ClassFactory(BaseFactory):
    """Raw factory: pass 'idoption' explicitly."""
    nomclasse = factory.Sequence(lambda n: f"Classe {n}")
    niveau = "1"

    class Meta:
        model = db_models.Classe

class ParentFactory(BaseFactory):
    nompere = Faker("last_name")
    nommere = Faker("last_name")
    adresse = Faker("street_address")
    emailpere = None
    emailmere = None

    class Meta:
        model = db_models.Parent

class StudentFactory(BaseFactory):
    nom = Faker("last_name")
    postnom = Faker("last_name")
    prenom = Faker("first_name")
    status = StudentStatusEnum.ONGOING.value
    photo = None
    idparent = None

    class Meta:
        model = db_models.Eleve

class FeeFactory(BaseFactory):
    description = factory.Sequence(lambda n: f"Frais scolaires {n}")
    montanttotal = decimal.Decimal("150.00")
    dateecheance = datetime.date(2024, 10, 1)
    idanneescolaire = None

    class Meta:
        model = db_models.Frais

class EnrollmentFactory(BaseFactory):
    """Raw factory: pass the three key columns explicitly."""
    class Meta:
        model = db_models.Inscription

class PaymentFactory(BaseFactory):
    montantpayer = decimal.Decimal("50.00")
    status = PaymentStatusEnum.SUCCESS.value
    ideleve = None
    idfrais = None

    class Meta:
        model = db_models.Paiement

class NotificationFactory(BaseFactory):
    message = Faker("sentence")
    idparent = None

    class Meta:
        model = db_models.Notification

class AdminUserFactory(BaseFactory):
    email = Faker("email")
    role = UserRole.ADMIN.value
    is_active = True
    password = factory.LazyFunction(lambda: HashedPassword.get_hash(TEST_PASSWORD_ADMIN))

    class Meta:
        model = db_models.Users

class ParentUserFactory(BaseFactory):
    email = Faker("email")
    role = UserRole.PARENT.value
    is_active = True
    password = factory.LazyFunction(lambda: HashedPassword.get_hash(TEST_PASSWORD_PARENT))

    class Meta:
        model = db_models.Users
