'''
Login, parent sign-up with e-mail confirmation, and password reset.
'''
from datetime import timedelta
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from .parent_service import ParentService
from .security import JWTHandler
from .user_service import UserService
from .mail_service import MailService, get_mail_service
from ..common.config import settings
from ..common.exceptions import ParentEmailNotFoundError
from ..common.security_utils import HashedPassword
from ..database import models as db_models
from ..database.db_enums import UserRole
from ..models import token as token_models
from ..models.token import TokenPurpose
from ..models import user as user_models
from ..common.logger import log

INVALID_LINK = "Lien invalide ou expiré."

class LoginService:
    """
    Service for handling user login and authentication.
    Depends on the UserService to fetch user data.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)]
    ):
        self.user_service = user_service

    async def login_user(self, form_data: OAuth2PasswordRequestForm) -> token_models.Token:
        log.info(f"Attempting login for user: {form_data.username}")

        user = await self.user_service.get_user_by_email(form_data.username)

        if not user or not HashedPassword.verify(form_data.password, user.password):
            log.warning(f"Login failed for user: {form_data.username} - Incorrect email or password")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            log.warning(f"Login failed for user: {form_data.username} - User is inactive.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user."
            )

        access_token = JWTHandler.create_access_token(subject=user.email, role=user.role)
        log.info(f"Login successful for user: {form_data.username}")

        return token_models.Token(access_token=access_token, token_type="bearer")


class SignUpService:
    """
    Portal accounts are reserved to registered parents: the e-mail must be the
    father's or the mother's e-mail of a parent file. A new account stays
    inactive until the link sent to that e-mail is followed.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)],
        parent_service: Annotated[ParentService, Depends(ParentService)],
        mail_service: Annotated[MailService, Depends(get_mail_service)]
    ):
        self.user_service = user_service
        self.parent_service = parent_service
        self.mail_service = mail_service

    async def _parent_id_for(self, email: str) -> int:
        lookup = await self.parent_service.find_id_by_email(email)
        if not lookup.success:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=lookup.error)
        if lookup.data is None:
            raise ParentEmailNotFoundError("Cet e-mail n'est pas associé à un parent enregistré.")
        return lookup.data

    async def sign_up_parent(self, data: user_models.SignUpRequest) -> db_models.Users:
        log.info(f"Parent sign-up attempt for {data.email}")
        try:
            idparent = await self._parent_id_for(data.email)
        except ParentEmailNotFoundError as e:
            log.warning(f"Sign-up refused for {data.email}: no parent file uses this e-mail.")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        user = await self.user_service.create_user(
            email=data.email,
            password=data.password,
            role=UserRole.PARENT,
            idparent=idparent,
            is_active=False
        )
        token = JWTHandler.create_action_token(
            subject=user.email,
            purpose=TokenPurpose.CONFIRM_EMAIL,
            expires_delta=timedelta(minutes=settings.EMAIL_CONFIRM_EXPIRE_MINUTES)
        )
        await self.mail_service.send_confirmation(user.email, token)
        log.info(f"Parent account {user.id} created for parent {idparent}, awaiting e-mail confirmation.")
        return user

    async def confirm_email(self, data: user_models.ConfirmEmailRequest) -> db_models.Users:
        payload = JWTHandler.decode_action_token(data.token, TokenPurpose.CONFIRM_EMAIL)
        user = await self.user_service.get_user_by_email(payload.sub) if payload else None
        if user is None:
            log.warning("E-mail confirmation refused: invalid or expired link.")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_LINK)
        if user.is_active:
            return user
        return await self.user_service.activate(user)


class PasswordResetService:
    """
    Password reset by e-mail. The link carries a fingerprint of the current
    password, so it works once; following it also confirms the e-mail.
    """
    def __init__(
        self,
        user_service: Annotated[UserService, Depends(UserService)],
        mail_service: Annotated[MailService, Depends(get_mail_service)]
    ):
        self.user_service = user_service
        self.mail_service = mail_service

    async def request_reset(self, data: user_models.ForgotPasswordRequest) -> user_models.MessageResponse:
        """The answer is the same whether or not the e-mail has an account."""
        log.info(f"Password reset requested for {data.email}")
        user = await self.user_service.get_user_by_email(data.email)
        if user is None:
            log.warning(f"Password reset requested for unknown e-mail {data.email}.")
        else:
            token = JWTHandler.create_action_token(
                subject=user.email,
                purpose=TokenPurpose.RESET_PASSWORD,
                expires_delta=timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
                fingerprint=HashedPassword.fingerprint(user.password)
            )
            await self.mail_service.send_password_reset(user.email, token)
        return user_models.MessageResponse(
            message="Si un compte existe pour cet e-mail, un lien de réinitialisation a été envoyé."
        )

    async def update_password(self, data: user_models.UpdatePasswordRequest) -> user_models.MessageResponse:
        payload = JWTHandler.decode_action_token(data.token, TokenPurpose.RESET_PASSWORD)
        user = await self.user_service.get_user_by_email(payload.sub) if payload else None
        if user is None or payload.fgp != HashedPassword.fingerprint(user.password):
            log.warning("Password update refused: invalid, expired or already used link.")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_LINK)

        await self.user_service.set_password(user, data.password)
        if not user.is_active:
            await self.user_service.activate(user)
        log.info(f"Password of account {user.id} updated through a reset link.")
        return user_models.MessageResponse(message="Mot de passe mis à jour.")
