"""Admin service — admin accounts, each backed by exactly one user row.

The user and admin rows of an account are written together inside a single
transaction; an admin id is only handed out once both rows are committed.
"""

from typing import Type

from passlib.context import CryptContext

from app.application.services.auth_service import pwd_context
from app.application.services.base_service import SoftDeleteService
from app.application.services.user_service import ACCOUNT_DISABLED, store_account, update_account
from app.core.exceptions import (
    BadRequestError,
    ResourceNotFoundError,
    ResourceNotModifiedError,
    storage_errors,
)
from app.domain.mappers import Payload, as_dict, to_admin_dto, to_admin_row
from app.domain.schemas.admin import AdminRead
from app.infrastructure.database import ConnectionPool
from app.infrastructure.repositories.admin_repository import AdminRepository
from app.infrastructure.repositories.user_repository import UserRepository


class AdminService(SoftDeleteService):
    resource_name = "admin"
    resource_plural = "admins"

    def __init__(
        self,
        pool: ConnectionPool,
        *,
        admin_repository: Type[AdminRepository] = AdminRepository,
        user_repository: Type[UserRepository] = UserRepository,
        context: CryptContext = pwd_context,
        logger=None,
    ):
        super().__init__(pool, admin_repository, logger)
        self.user_repository = user_repository
        self.context = context

    def to_dto(self, row) -> AdminRead:
        return to_admin_dto(row)

    async def store(self, payload: Payload) -> AdminRead:
        """Create the user row (role admin) and its admin row atomically."""
        data = as_dict(payload)
        with storage_errors("Error while storing admin", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                users = self.user_repository(conn)
                admins = self.repository(conn)

                user_id = await store_account(users, data, "admin", self.context)
                admin_id = await admins.store({**to_admin_row(data), "user_id": user_id})
                row = await admins.find_by_id(admin_id)

        self.logger.info("Admin created", admin_id=admin_id, user_id=user_id)
        return self.to_dto(row)

    async def update(self, id: int, payload: Payload) -> AdminRead:
        """Update the user profile fields and/or the admin flags.

        Rejected while the backing user account is soft-deleted.
        """
        data = as_dict(payload)
        with storage_errors("Error while updating admin", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                users = self.user_repository(conn)
                admins = self.repository(conn)

                admin = await admins.find_by_id(id)
                if admin is None:
                    raise ResourceNotFoundError(self.resource_name)
                if admin["deleted_at"] is not None:
                    raise BadRequestError(ACCOUNT_DISABLED)

                await update_account(users, admin["user_id"], data, self.context, self.resource_name)

                admin_fields = to_admin_row(data)
                if admin_fields and await admins.update(admin_fields, id) != 1:
                    raise ResourceNotModifiedError("The admin was not updated")

                row = await admins.find_by_id(id)

        self.logger.info("Admin updated", admin_id=id)
        return self.to_dto(row)
