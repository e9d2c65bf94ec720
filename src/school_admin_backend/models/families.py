'''
Parents and students (élèves).
'''
import datetime
from typing import Optional

from pydantic import EmailStr, Field, computed_field

from ..database.db_enums import StudentStatusEnum
from .academics import ClassRead
from .base import FormModel, ReadModel


def parent_display_name(parent) -> str:
    """'father & mother' as shown in every table, or N/A for a student without parent."""
    if parent is None:
        return "N/A"
    return f"{parent.nompere} & {parent.nommere}"


# --- Parents ---

class ParentCreate(FormModel):
    nompere: str = Field(..., min_length=2)
    nommere: str = Field(..., min_length=2)
    adresse: Optional[str] = None
    emailpere: Optional[EmailStr] = None
    emailmere: Optional[EmailStr] = None
    professionpere: Optional[str] = None
    professionmere: Optional[str] = None
    telephonepere: Optional[str] = None
    telephonemere: Optional[str] = None


class ParentUpdate(FormModel):
    nompere: str = Field(None, min_length=2)
    nommere: str = Field(None, min_length=2)
    adresse: Optional[str] = None
    emailpere: Optional[EmailStr] = None
    emailmere: Optional[EmailStr] = None
    professionpere: Optional[str] = None
    professionmere: Optional[str] = None
    telephonepere: Optional[str] = None
    telephonemere: Optional[str] = None


class ParentRead(ReadModel):
    idparent: int
    nompere: str
    nommere: str
    adresse: Optional[str] = None
    emailpere: Optional[str] = None
    emailmere: Optional[str] = None
    professionpere: Optional[str] = None
    professionmere: Optional[str] = None
    telephonepere: Optional[str] = None
    telephonemere: Optional[str] = None


class ParentSummary(ReadModel):
    """The parent columns joined into student and notification rows."""
    idparent: int
    nompere: str
    nommere: str


# --- Students ---

class StudentCreate(FormModel):
    nom: str = Field(..., min_length=2)
    postnom: str = Field(..., min_length=2)
    prenom: Optional[str] = None
    datenaissance: Optional[datetime.date] = None
    lieunaissance: Optional[str] = None
    adresse: Optional[str] = None
    moyentransport: Optional[str] = None
    status: StudentStatusEnum = StudentStatusEnum.ONGOING.value
    idparent: Optional[int] = None


class StudentUpdate(FormModel):
    nom: str = Field(None, min_length=2)
    postnom: str = Field(None, min_length=2)
    prenom: Optional[str] = None
    datenaissance: Optional[datetime.date] = None
    lieunaissance: Optional[str] = None
    adresse: Optional[str] = None
    moyentransport: Optional[str] = None
    status: StudentStatusEnum = None
    idparent: Optional[int] = None


class StudentSummary(ReadModel):
    """The student columns joined into enrollment and payment rows."""
    ideleve: int
    nom: str
    postnom: str
    prenom: Optional[str] = None


class StudentRead(ReadModel):
    ideleve: int
    nom: str
    postnom: str
    prenom: Optional[str] = None
    datenaissance: Optional[datetime.date] = None
    lieunaissance: Optional[str] = None
    adresse: Optional[str] = None
    moyentransport: Optional[str] = None
    status: str
    photo: Optional[str] = None
    idparent: Optional[int] = None
    parent: Optional[ParentSummary] = None

    @computed_field
    @property
    def parent_name(self) -> str:
        return parent_display_name(self.parent)


class ChildRead(StudentRead):
    """
    A student as shown on the parent portal, with the class (and its option)
    of the student's first enrollment.
    """
    classe: Optional[ClassRead] = None


class PortalParentRead(ParentRead):
    children: list[ChildRead] = Field(default_factory=list)
