"""
Tests for UserService: customer accounts, self-delete guard and password changes.
"""
from __future__ import annotations

import pytest

from app.core.exceptions import (
    BadRequestError,
    EmailAlreadyTakenError,
    ForbiddenError,
    ResourceNotFoundError,
)
from app.domain.models.user import User
from app.domain.schemas.user import UserCreate

from conftest import ADMIN_PAYLOAD, checked_out, count_rows

CUSTOMER = {"first_name": "Carla", "last_name": "Client", "email": "c@x.com", "password": "secret12"}


async def test_store_creates_customer(user_service, pool):
    user = await user_service.store(UserCreate(**CUSTOMER))

    assert user.user_role == "customer"
    assert user.email == "c@x.com"
    assert not hasattr(user, "password")
    assert await count_rows(pool, User) == 1
    assert checked_out(pool) == 0


async def test_customer_cannot_reuse_admin_email(user_service, admin_service, pool):
    await admin_service.store(ADMIN_PAYLOAD)

    with pytest.raises(EmailAlreadyTakenError):
        await user_service.store({**CUSTOMER, "email": ADMIN_PAYLOAD["email"]})

    assert await count_rows(pool, User) == 1


async def test_update_disabled_user_is_rejected(user_service):
    user = await user_service.store(CUSTOMER)
    await user_service.delete(user.id)

    with pytest.raises(BadRequestError) as exc_info:
        await user_service.update(user.id, {"first_name": "Other"})
    assert exc_info.value.message == "The user account is disabled"


async def test_update_changes_names(user_service):
    user = await user_service.store(CUSTOMER)

    updated = await user_service.update(user.id, {"last_name": "Customer"})

    assert updated.last_name == "Customer"
    assert updated.first_name == "Carla"


async def test_delete_own_account_is_rejected(user_service):
    user = await user_service.store(CUSTOMER)

    with pytest.raises(BadRequestError):
        await user_service.delete(user.id, auth_user_id=user.id)

    assert (await user_service.find_by_id(user.id)).deleted_at is None


async def test_delete_then_restore(user_service):
    user = await user_service.store(CUSTOMER)

    await user_service.delete(user.id, auth_user_id=user.id + 100)
    assert (await user_service.find_by_id(user.id)).deleted_at is not None

    await user_service.restore(user.id)
    assert (await user_service.find_by_id(user.id)).deleted_at is None

    with pytest.raises(ResourceNotFoundError):
        await user_service.restore(user.id)


async def test_change_password(user_service, pool, context):
    user = await user_service.store(CUSTOMER)

    await user_service.change_password(user.id, "secret12", "newpass99", auth_user_id=user.id)

    async with pool.connection() as conn:
        repo = user_service.repository(conn)
        stored = (await repo.find_by_id(user.id))["password"]
    assert context.verify("newpass99", stored)


async def test_change_password_with_wrong_current_password(user_service):
    user = await user_service.store(CUSTOMER)

    with pytest.raises(BadRequestError) as exc_info:
        await user_service.change_password(user.id, "wrongpass", "newpass99", auth_user_id=user.id)
    assert exc_info.value.message == "The current password is not valid"


async def test_change_password_of_someone_else_is_forbidden(user_service):
    user = await user_service.store(CUSTOMER)

    with pytest.raises(ForbiddenError):
        await user_service.change_password(user.id, "secret12", "newpass99", auth_user_id=user.id + 1)


async def test_find_all_paginates(user_service):
    for n in range(5):
        await user_service.store({**CUSTOMER, "email": f"user{n}@x.com"})

    result = await user_service.find_all(page=2, size=2)

    assert [u.email for u in result["items"]] == ["user2@x.com", "user3@x.com"]
    assert result["pagination"] == {"page": 2, "size": 2, "total_elements": 5, "total_pages": 3}


async def test_plain_dict_emails_are_normalized(user_service, admin_service):
    user = await user_service.store({**CUSTOMER, "email": "  Carla@X.COM "})
    assert user.email == "carla@x.com"

    with pytest.raises(EmailAlreadyTakenError):
        await admin_service.store({**ADMIN_PAYLOAD, "email": "CARLA@x.com"})

    other = await user_service.store({**CUSTOMER, "email": "d@x.com"})
    with pytest.raises(EmailAlreadyTakenError):
        await user_service.update(other.id, {"email": " Carla@x.com"})


async def test_malformed_plain_dict_email_is_bad_request(user_service, pool):
    with pytest.raises(BadRequestError):
        await user_service.store({**CUSTOMER, "email": "not-an-email"})

    assert await count_rows(pool, User) == 0
