'''
API endpoints for Authentication: login, parent sign-up and confirmation,
password reset and the current user.
'''
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from ..database import models as db_models
from ..services.auth_service import LoginService, PasswordResetService, SignUpService
from ..services.security import verify_token_and_get_user
from ..models import token as token_models
from ..models import user as user_models
from ..common.logger import log

class AuthRoutes:
    """
    A class to encapsulate all authentication endpoints.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/auth",
            tags=["Authentication"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/login",
            self.login_for_access_token,
            methods=["POST"],
            response_model=token_models.Token,
            summary="Login for Access Token"
        )
        self.router.add_api_route(
            "/sign-up",
            self.sign_up_parent,
            methods=["POST"],
            response_model=user_models.UserRead,
            status_code=status.HTTP_201_CREATED,
            summary="Parent Sign-up"
        )
        self.router.add_api_route(
            "/confirm",
            self.confirm_email,
            methods=["POST"],
            response_model=user_models.UserRead,
            summary="Confirm E-mail"
        )
        self.router.add_api_route(
            "/forgot-password",
            self.forgot_password,
            methods=["POST"],
            response_model=user_models.MessageResponse,
            status_code=status.HTTP_202_ACCEPTED,
            summary="Request a Password Reset"
        )
        self.router.add_api_route(
            "/update-password",
            self.update_password,
            methods=["POST"],
            response_model=user_models.MessageResponse,
            summary="Set a New Password"
        )
        self.router.add_api_route(
            "/me",
            self.read_current_user,
            methods=["GET"],
            response_model=user_models.UserRead,
            summary="Current User"
        )

    async def login_for_access_token(
        self,
        form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
        login_service: Annotated[LoginService, Depends(LoginService)]
    ):
        """
        Authenticates a user and returns an access token.
        Uses OAuth2PasswordRequestForm (username & password fields).
        """
        try:
            token = await login_service.login_user(form_data)
            return token
        except HTTPException as e:
            raise e
        except Exception as e:
            log.error(f"Unexpected error during login: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal server error occurred during login.",
            )

    async def sign_up_parent(
        self,
        sign_up_data: user_models.SignUpRequest,
        sign_up_service: Annotated[SignUpService, Depends(SignUpService)]
    ):
        """
        Creates a portal account for a registered parent.
        The e-mail must be one of the e-mails on the parent's file; the account
        stays inactive until the link sent to it is followed.
        """
        return await sign_up_service.sign_up_parent(sign_up_data)

    async def confirm_email(
        self,
        confirm_data: user_models.ConfirmEmailRequest,
        sign_up_service: Annotated[SignUpService, Depends(SignUpService)]
    ):
        """Activates the account whose confirmation link carried this token."""
        return await sign_up_service.confirm_email(confirm_data)

    async def forgot_password(
        self,
        forgot_data: user_models.ForgotPasswordRequest,
        reset_service: Annotated[PasswordResetService, Depends(PasswordResetService)]
    ):
        return await reset_service.request_reset(forgot_data)

    async def update_password(
        self,
        update_data: user_models.UpdatePasswordRequest,
        reset_service: Annotated[PasswordResetService, Depends(PasswordResetService)]
    ):
        return await reset_service.update_password(update_data)

    async def read_current_user(
        self,
        current_user: Annotated[db_models.Users, Depends(verify_token_and_get_user)]
    ):
        return current_user

# Create an instance of the class and export its router
auth_routes = AuthRoutes()
router = auth_routes.router
