'''
Database operations on the 'users' table.
'''
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.logger import log
from ..common.security_utils import HashedPassword
from ..database import models as db_models
from ..database.db_enums import UserRole
from ..database.engine import get_db_session


class UserService:
    """
    Service for user accounts (admins of the dashboard, parents of the portal).
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    async def get_user_by_email(self, email: str) -> db_models.Users | None:
        log.info(f"Fetching user by email: {email}")
        try:
            stmt = select(db_models.Users).filter(db_models.Users.email == email.strip().lower())
            result = await self.db.execute(stmt)
            return result.scalars().first()
        except Exception as e:
            log.error(f"Database error fetching user by email {email}: {e}", exc_info=True)
            raise

    async def create_user(
        self,
        email: str,
        password: str,
        role: UserRole,
        idparent: Optional[int] = None,
        is_active: bool = True
    ) -> db_models.Users:
        """
        Creates an account with a bcrypt-hashed password.
        Raises 400 if the e-mail already has an account.
        """
        email = email.strip().lower()
        log.info(f"Creating {role.value} account for {email}.")
        if await self.get_user_by_email(email):
            log.warning(f"Account creation refused: {email} already registered.")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Un compte existe déjà pour cet e-mail."
            )
        try:
            user = db_models.Users(
                email=email,
                password=HashedPassword.get_hash(password),
                role=role.value,
                idparent=idparent,
                is_active=is_active
            )
            self.db.add(user)
            await self.db.flush()
            await self.db.refresh(user)
            return user
        except IntegrityError as e:
            log.warning(f"Integrity error while creating account {email}: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Un compte existe déjà pour cet e-mail."
            )
        except Exception as e:
            log.error(f"Error creating account {email}: {e}", exc_info=True)
            raise

    async def activate(self, user: db_models.Users) -> db_models.Users:
        log.info(f"Activating account {user.id} ({user.email}).")
        user.is_active = True
        await self.db.flush()
        return user

    async def set_password(self, user: db_models.Users, password: str) -> db_models.Users:
        log.info(f"Changing the password of account {user.id}.")
        user.password = HashedPassword.get_hash(password)
        await self.db.flush()
        return user
