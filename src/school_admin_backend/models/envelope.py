'''
The envelope every access function returns.
Access functions never raise: the outcome of the remote call is carried by
'success', the message by 'error' and its kind by 'code'.
'''
import enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    NOT_FOUND = "not_found"
    REMOTE_FAILURE = "remote_failure"
    EXCEPTION = "exception"
    INVALID = "invalid"


class Result(BaseModel, Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None
    success: bool
    code: Optional[ErrorCode] = None
    # Per-field messages of an 'invalid' result, read by the form controller
    field_errors: Optional[dict[str, list[str]]] = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> 'Result[T]':
        return cls(data=data, success=True)

    @classmethod
    def fail(cls, error: str, code: ErrorCode = ErrorCode.EXCEPTION) -> 'Result[T]':
        return cls(error=error, success=False, code=code)

    @classmethod
    def invalid(cls, error: str, field_errors: dict[str, list[str]]) -> 'Result[T]':
        return cls(error=error, success=False, code=ErrorCode.INVALID, field_errors=field_errors)


class CountResult(BaseModel):
    count: int = 0
    error: Optional[str] = None
    success: bool
    code: Optional[ErrorCode] = None


class TotalResult(BaseModel):
    total: float = 0.0
    error: Optional[str] = None
    success: bool
    code: Optional[ErrorCode] = None
