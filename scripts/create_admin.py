"""
Standalone script creating a dashboard (admin) account.

Usage:
    python scripts/create_admin.py admin@ecole.cd 'a strong password'
"""

import argparse
import asyncio
import os
import sys

# --- Path Setup ---
# This allows the script to import modules from the 'src' directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi import HTTPException

from src.school_admin_backend.database import engine as db_engine
from src.school_admin_backend.database.db_enums import UserRole
from src.school_admin_backend.models.user import AdminCreate
from src.school_admin_backend.services.user_service import UserService


async def create_admin(email: str, password: str):
    data = AdminCreate(email=email, password=password)
    db_engine.create_db_engine_and_session_factory()
    try:
        async with db_engine.AsyncSessionLocal() as session:
            try:
                user = await UserService(session).create_user(data.email, data.password, UserRole.ADMIN)
                await session.commit()
                print(f"Admin account {user.id} created for {user.email}.")
            except HTTPException as e:
                await session.rollback()
                print(f"Admin account not created: {e.detail}")
    finally:
        await db_engine.dispose_db_engine()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a dashboard admin account.")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()
    asyncio.run(create_admin(args.email, args.password))
