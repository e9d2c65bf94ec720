'''
Accounts of the dashboard (admins) and of the parent portal.
'''
import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..database.db_enums import UserRole


class UserRead(BaseModel):
    """
    Pydantic model for reading user data.
    Corresponds to the db_models.Users ORM model; the password hash is never exposed.
    """
    id: int
    email: str
    role: UserRole
    idparent: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SignUpRequest(BaseModel):
    """A parent creating a portal account with one of the e-mails on their file."""
    email: EmailStr
    password: str = Field(..., min_length=6)


class ConfirmEmailRequest(BaseModel):
    token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class UpdatePasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=6)


class MessageResponse(BaseModel):
    message: str


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
