'''
Enrollments (inscriptions), keyed by (student, class, school year).
'''
import datetime
from typing import NamedTuple, Optional

from .academics import ClassRead, SchoolYearRead
from .base import FormModel, ReadModel
from .families import StudentSummary


class EnrollmentKey(NamedTuple):
    ideleve: int
    idclasse: int
    idanneescolaire: int


class EnrollmentCreate(FormModel):
    ideleve: int
    idclasse: int
    idanneescolaire: int


class EnrollmentUpdate(FormModel):
    """The key columns are immutable; only the enrollment date may change."""
    dateinscription: datetime.datetime = None


class EnrollmentRead(ReadModel):
    ideleve: int
    idclasse: int
    idanneescolaire: int
    dateinscription: datetime.datetime
    eleve: Optional[StudentSummary] = None
    classe: Optional[ClassRead] = None
    anneescolaire: Optional[SchoolYearRead] = None
