'''
User-facing notifications produced by the form controller and the list synchronizer.
'''
import enum
from typing import Optional

from pydantic import BaseModel


class ToastLevel(str, enum.Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Toast(BaseModel):
    level: ToastLevel
    title: str
    description: Optional[str] = None
