'''
JWT issuing and verification, and the role guards of the two front ends.
'''
from datetime import datetime, timedelta, timezone
from typing import Optional, Annotated
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from ..common.config import settings
from ..models.token import ActionTokenPayload, TokenPayload, TokenPurpose
from ..common.logger import log
from ..database import models as db_models
from ..database.db_enums import UserRole
from .user_service import UserService

# --- JWT Handling ---
class JWTHandler:
    @staticmethod
    def create_access_token(
        subject: str,
        role: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(subject), "role": role, "exp": expire}
        encoded_jwt = jwt.encode(
            to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
        )
        return encoded_jwt

    @staticmethod
    def decode_token(token: str) -> TokenPayload | None:
        try:
            payload = jwt.decode(
                token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
            )
            return TokenPayload(**payload)
        except (JWTError, ValueError) as e: # Catch Pydantic validation errors too
            log.warning(f"JWT decode/validation error: {e}")
            return None

    @staticmethod
    def create_action_token(
        subject: str,
        purpose: TokenPurpose,
        expires_delta: timedelta,
        fingerprint: Optional[str] = None
    ) -> str:
        """A token sent by e-mail; it is only accepted for 'purpose'."""
        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(subject), "purpose": purpose.value, "exp": expire}
        if fingerprint is not None:
            to_encode["fgp"] = fingerprint
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_action_token(token: str, purpose: TokenPurpose) -> ActionTokenPayload | None:
        try:
            payload = ActionTokenPayload(
                **jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
            )
        except (JWTError, ValueError) as e:
            log.warning(f"Action token decode/validation error: {e}")
            return None
        if payload.purpose != purpose:
            log.warning(f"Token issued for '{payload.purpose.value}' used for '{purpose.value}'.")
            return None
        return payload

# --- JWT Verification Dependency Functions ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

async def get_user_from_token(token: str, user_service: UserService) -> db_models.Users | None:
    """The active user a token was issued to, or None."""
    token_data = JWTHandler.decode_token(token)
    if not token_data or not token_data.sub:
        log.warning("JWT decode failed or invalid token structure.")
        return None

    user = await user_service.get_user_by_email(token_data.sub)
    if user is None:
        log.warning(f"User '{token_data.sub}' not found during token verification.")
        return None
    if not user.is_active:
        log.warning(f"User '{token_data.sub}' is not active.")
        return None
    return user

async def verify_token_and_get_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    user_service: Annotated[UserService, Depends(UserService)]
    ) -> db_models.Users:
    """
    Dependency to verify the bearer JWT and fetch the user it was issued to.
    """
    user = await get_user_from_token(token, user_service)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    log.info(f"JWT verified successfully for user: {user.email} (Role: {user.role})")
    return user

async def require_admin(
    current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)]
) -> db_models.Users:
    """Dashboard guard: every role except 'parent'."""
    if current_user.role == UserRole.PARENT.value:
        log.warning(f"Parent user {current_user.id} tried to reach the dashboard.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action."
        )
    return current_user

async def require_parent(
    current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)]
) -> db_models.Users:
    """Portal guard: a 'parent' account linked to a parent file."""
    if current_user.role != UserRole.PARENT.value or current_user.idparent is None:
        log.warning(f"User {current_user.id} (Role: {current_user.role}) tried to reach the parent portal.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action."
        )
    return current_user
