'''
School years, options and classes.
'''
import datetime
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from ..database.db_enums import SchoolYearStatusEnum
from .base import FormModel, ReadModel


DATES_ORDER_ERROR = "La date de fin doit être postérieure ou égale à la date de début."


def end_not_before_start(datefin: Optional[datetime.date], info: ValidationInfo) -> Optional[datetime.date]:
    datedebut = info.data.get("datedebut")
    if datefin is not None and datedebut is not None and datefin < datedebut:
        raise ValueError(DATES_ORDER_ERROR)
    return datefin


# --- School years ---

class SchoolYearCreate(FormModel):
    libelle: str = Field(..., min_length=2)
    status: SchoolYearStatusEnum = SchoolYearStatusEnum.ONGOING.value
    datedebut: datetime.date
    datefin: datetime.date

    @field_validator("datefin")
    @classmethod
    def check_dates(cls, datefin, info: ValidationInfo):
        return end_not_before_start(datefin, info)


class SchoolYearUpdate(FormModel):
    """All fields optional; a field sent blank or null is rejected when the column is required."""
    libelle: str = Field(None, min_length=2)
    status: SchoolYearStatusEnum = None
    datedebut: datetime.date = None
    datefin: datetime.date = None

    @field_validator("datefin")
    @classmethod
    def check_dates(cls, datefin, info: ValidationInfo):
        return end_not_before_start(datefin, info)


class SchoolYearRead(ReadModel):
    idanneescolaire: int
    libelle: str
    status: str
    datedebut: datetime.date
    datefin: datetime.date


# --- Options ---

class OptionCreate(FormModel):
    nomoption: str = Field(..., min_length=2)
    abreviation: str = Field(..., min_length=1)


class OptionUpdate(FormModel):
    nomoption: str = Field(None, min_length=2)
    abreviation: str = Field(None, min_length=1)


class OptionRead(ReadModel):
    idoption: int
    nomoption: str
    abreviation: str


# --- Classes ---

class ClassCreate(FormModel):
    nomclasse: str = Field(..., min_length=2)
    niveau: Optional[str] = None
    idoption: int


class ClassUpdate(FormModel):
    nomclasse: str = Field(None, min_length=2)
    niveau: Optional[str] = None
    idoption: int = None


class ClassRead(ReadModel):
    idclasse: int
    nomclasse: str
    niveau: Optional[str] = None
    idoption: int
    option: Optional[OptionRead] = None
