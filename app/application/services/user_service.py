"""User service — customer accounts, plus the account helpers shared with admins."""

from typing import Any, Mapping, Optional, Type

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from app.application.services.auth_service import hash_password, pwd_context, verify_password
from app.application.services.base_service import SoftDeleteService
from app.core.exceptions import (
    BadRequestError,
    EmailAlreadyTakenError,
    ForbiddenError,
    ResourceNotFoundError,
    ResourceNotModifiedError,
    storage_errors,
)
from app.domain.mappers import Payload, as_dict, to_user_dto, to_user_row
from app.domain.schemas.user import UserRead, clean_email
from app.infrastructure.database import ConnectionPool
from app.infrastructure.repositories.user_repository import UserRepository

ACCOUNT_DISABLED = "The user account is disabled"


def is_email_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the users.email unique key."""
    return "email" in str(exc.orig).lower()


def normalized_email(value: str) -> str:
    """Lowercased, trimmed email, or a ``BadRequestError`` when malformed."""
    try:
        return clean_email(value)
    except ValueError as exc:
        raise BadRequestError(errors=[{"field": "email", "message": str(exc)}]) from exc


async def store_account(
    users: UserRepository,
    payload: Mapping[str, Any],
    role: str,
    context: CryptContext,
) -> int:
    """Insert a user row for ``role`` once its email is known to be free.

    The email is checked against every user row, soft-deleted ones included.
    Two concurrent calls can both pass that check; the unique constraint on
    ``users.email`` then rejects the second insert, which is reported the
    same way.
    """
    email = normalized_email(payload["email"])
    if await users.find_by_email_with_trashed(email) is not None:
        raise EmailAlreadyTakenError(email)

    fields = to_user_row({**payload, "email": email, "password": await hash_password(payload["password"], context)})
    try:
        return await users.store(fields, role=role)
    except IntegrityError as exc:
        if is_email_conflict(exc):
            raise EmailAlreadyTakenError(email) from exc
        raise


async def update_account(
    users: UserRepository,
    user_id: int,
    payload: Mapping[str, Any],
    context: CryptContext,
    resource_name: str,
) -> None:
    """Apply profile/password changes to an existing, enabled user row."""
    fields = to_user_row(payload)
    if not fields:
        return

    email = fields.get("email")
    if email is not None:
        email = fields["email"] = normalized_email(email)
        owner = await users.find_by_email_with_trashed(email)
        if owner is not None and owner["id"] != user_id:
            raise EmailAlreadyTakenError(email)

    if "password" in fields:
        fields["password"] = await hash_password(fields["password"], context)

    try:
        affected = await users.update(fields, user_id)
    except IntegrityError as exc:
        if email is not None and is_email_conflict(exc):
            raise EmailAlreadyTakenError(email) from exc
        raise
    if affected != 1:
        raise ResourceNotModifiedError(f"The {resource_name} was not updated")


class UserService(SoftDeleteService):
    resource_name = "user"
    resource_plural = "users"

    def __init__(
        self,
        pool: ConnectionPool,
        *,
        user_repository: Type[UserRepository] = UserRepository,
        context: CryptContext = pwd_context,
        logger=None,
    ):
        super().__init__(pool, user_repository, logger)
        self.context = context

    def to_dto(self, row) -> UserRead:
        return to_user_dto(row)

    async def store(self, payload: Payload) -> UserRead:
        data = as_dict(payload)
        with storage_errors("Error while storing user", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                users = self.repository(conn)
                user_id = await store_account(users, data, "customer", self.context)
                row = await users.find_by_id(user_id)
        self.logger.info("User created", user_id=user_id)
        return self.to_dto(row)

    async def update(self, id: int, payload: Payload) -> UserRead:
        data = as_dict(payload)
        with storage_errors("Error while updating user", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                users = self.repository(conn)
                user = await users.find_by_id(id)
                if user is None:
                    raise ResourceNotFoundError(self.resource_name)
                if user["deleted_at"] is not None:
                    raise BadRequestError(ACCOUNT_DISABLED)
                await update_account(users, id, data, self.context, self.resource_name)
                row = await users.find_by_id(id)
        self.logger.info("User updated", user_id=id)
        return self.to_dto(row)

    async def delete(self, id: int, auth_user_id: Optional[int] = None) -> int:
        if auth_user_id is not None and auth_user_id == id:
            raise BadRequestError("You cannot delete your own account")
        return await super().delete(id)

    async def change_password(
        self,
        id: int,
        current_password: str,
        new_password: str,
        auth_user_id: Optional[int] = None,
    ) -> None:
        """Replace a user's password after checking the current one."""
        if auth_user_id is not None and auth_user_id != id:
            raise ForbiddenError("You can only change your own password")

        with storage_errors("Error while changing the user password", self.logger):
            async with self.pool.connection(transactional=True) as conn:
                users = self.repository(conn)
                user = await users.find_by_id(id)
                if user is None:
                    raise ResourceNotFoundError(self.resource_name)
                if user["deleted_at"] is not None:
                    raise BadRequestError(ACCOUNT_DISABLED)
                if not await verify_password(current_password, user["password"], self.context):
                    raise BadRequestError("The current password is not valid")
                await update_account(users, id, {"password": new_password}, self.context, self.resource_name)
        self.logger.info("User password changed", user_id=id)