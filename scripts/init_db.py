"""
Standalone script creating every table of the school schema that does not exist yet.

Reads DATABASE_URL (or DATABASE_URL_TEST when TEST_MODE=true) from the environment / .env.
"""

import asyncio
import os
import sys

# --- Path Setup ---
# This allows the script to import modules from the 'src' directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.school_admin_backend.common.config import settings
from src.school_admin_backend.database import engine as db_engine


async def main():
    print(f"Creating tables on {settings.database_url.split('@')[-1]} ...")
    db_engine.create_db_engine_and_session_factory()
    try:
        await db_engine.init_models()
    finally:
        await db_engine.dispose_db_engine()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
