
import asyncio
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.application.services.admin_service import AdminService
from app.core.exceptions import AppError
from app.infrastructure.database import ConnectionPool, init_db


async def bootstrap():
    """Create the schema, seed roles and optionally the first super admin.

    The admin is read from BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD.
    """
    print("Creating tables and seeding user roles...")
    pool = ConnectionPool.from_settings()
    try:
        await init_db(pool.engine)
        print("Schema ready.")

        email = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
        password = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
        if not email or not password:
            print("No bootstrap admin configured, skipping.")
            return

        try:
            admin = await AdminService(pool).store(
                {
                    "first_name": "Super",
                    "last_name": "Admin",
                    "email": email,
                    "password": password,
                    "is_super": True,
                }
            )
            print(f"Super admin created with id {admin.id}.")
        except AppError as e:
            print(f"Super admin not created: {e.message}")
    finally:
        await pool.dispose()


if __name__ == "__main__":
    asyncio.run(bootstrap())
