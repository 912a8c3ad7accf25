"""Users API routes — customer accounts, soft delete/restore and password changes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.application.services.user_service import UserService
from app.domain.schemas.user import PasswordChange, UserCreate, UserRead, UserUpdate
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users(
    page: Optional[int] = Query(None),
    size: Optional[int] = Query(None),
    sort: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(require_admin),
):
    result = await service.find_all(page=page, size=size, sort=sort, status=status, search=search)
    return {"message": "Ok", "users": result["items"], "pagination": result["pagination"]}


@router.get("/{user_id}")
async def show_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Ok", "user": await service.find_by_id(user_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_user(body: UserCreate, service: UserService = Depends(get_user_service)):
    return {"message": "Created", "user": await service.store(body)}


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Updated", "user": await service.update(user_id, body)}


@router.put("/{user_id}/restore")
async def restore_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(require_admin),
):
    restored_id = await service.restore(user_id)
    return {"message": "The user was successfully restored", "user": {"id": restored_id}}


@router.delete("/{user_id}")
async def destroy_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(require_admin),
):
    deleted_id = await service.delete(user_id, auth_user_id=user.id)
    return {"message": "The user was successfully deleted", "user": {"id": deleted_id}}


@router.post("/{user_id}/change-password")
async def change_password(
    user_id: int,
    body: PasswordChange,
    service: UserService = Depends(get_user_service),
    user: UserRead = Depends(get_current_user),
):
    await service.change_password(
        user_id,
        body.current_password,
        body.new_password,
        auth_user_id=user.id,
    )
    return {"message": "Ok"}
