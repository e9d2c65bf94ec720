'''
Notifications sent to one parent, or to every parent when 'idparent' is null.
'''
import datetime
from typing import Optional

from pydantic import Field, computed_field

from .base import FormModel, ReadModel
from .families import ParentSummary, parent_display_name


class NotificationCreate(FormModel):
    message: str = Field(..., min_length=5)
    idparent: Optional[int] = None


class NotificationUpdate(FormModel):
    message: str = Field(None, min_length=5)
    idparent: Optional[int] = None


class NotificationRead(ReadModel):
    idnotification: int
    message: str
    dateenvoi: datetime.datetime
    idparent: Optional[int] = None
    parent: Optional[ParentSummary] = None

    @computed_field
    @property
    def parent_name(self) -> str:
        return parent_display_name(self.parent)
