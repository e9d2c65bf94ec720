'''
JWT payloads: the bearer access token, and the single-purpose tokens sent by
e-mail (account confirmation, password reset).
'''
import enum
from typing import Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenPayload(BaseModel):
    sub: EmailStr # 'sub' is standard JWT claim for subject (the user's email)
    role: str
    exp: datetime

class TokenPurpose(str, enum.Enum):
    CONFIRM_EMAIL = "confirm_email"
    RESET_PASSWORD = "reset_password"

class ActionTokenPayload(BaseModel):
    sub: EmailStr
    purpose: TokenPurpose
    fgp: Optional[str] = None  # password fingerprint, reset tokens only
    exp: datetime
