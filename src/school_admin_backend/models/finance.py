'''
Fees (frais) and payments (paiements).
Amounts are validated as Decimal and read back as float.
'''
import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import Field, field_validator

from ..database.db_enums import PaymentStatusEnum
from .academics import SchoolYearRead
from .base import FormModel, ReadModel
from .families import StudentSummary

CENT = Decimal("0.01")


def to_cents(amount: Optional[Decimal]) -> Optional[Decimal]:
    if amount is None:
        return None
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


# --- Fees ---

class FeeCreate(FormModel):
    description: str = Field(..., min_length=5)
    montanttotal: Decimal = Field(..., ge=CENT)
    dateecheance: Optional[datetime.date] = None
    idanneescolaire: Optional[int] = None

    @field_validator("montanttotal")
    @classmethod
    def round_amount(cls, value):
        return to_cents(value)


class FeeUpdate(FormModel):
    description: str = Field(None, min_length=5)
    montanttotal: Decimal = Field(None, ge=CENT)
    dateecheance: Optional[datetime.date] = None
    idanneescolaire: Optional[int] = None

    @field_validator("montanttotal")
    @classmethod
    def round_amount(cls, value):
        return to_cents(value)


class FeeSummary(ReadModel):
    """The fee columns joined into payment rows."""
    idfrais: int
    description: str
    montanttotal: float


class FeeRead(ReadModel):
    idfrais: int
    description: str
    montanttotal: float
    dateecheance: Optional[datetime.date] = None
    idanneescolaire: Optional[int] = None
    anneescolaire: Optional[SchoolYearRead] = None


# --- Payments ---

class PaymentCreate(FormModel):
    montantpayer: Decimal = Field(..., gt=0)
    status: PaymentStatusEnum = PaymentStatusEnum.PENDING.value
    ideleve: Optional[int] = None
    idfrais: Optional[int] = None

    @field_validator("montantpayer")
    @classmethod
    def round_amount(cls, value):
        return to_cents(value)


class PaymentUpdate(FormModel):
    montantpayer: Decimal = Field(None, gt=0)
    status: PaymentStatusEnum = None
    ideleve: Optional[int] = None
    idfrais: Optional[int] = None

    @field_validator("montantpayer")
    @classmethod
    def round_amount(cls, value):
        return to_cents(value)


class PaymentRead(ReadModel):
    idpaiement: int
    montantpayer: float
    datepaiement: datetime.datetime
    status: str
    ideleve: Optional[int] = None
    idfrais: Optional[int] = None
    eleve: Optional[StudentSummary] = None
    frais: Optional[FeeSummary] = None
