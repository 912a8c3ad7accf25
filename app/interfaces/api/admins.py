"""Admins API routes — CRUD plus soft delete/restore, administrators only."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.application.services.admin_service import AdminService
from app.domain.schemas.admin import AdminCreate, AdminUpdate
from app.domain.schemas.user import UserRead
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_admin_service

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get("")
async def list_admins(
    page: Optional[int] = Query(None),
    size: Optional[int] = Query(None),
    sort: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    result = await service.find_all(page=page, size=size, sort=sort, status=status, search=search)
    return {"message": "Ok", "admins": result["items"], "pagination": result["pagination"]}


@router.get("/{admin_id}")
async def show_admin(
    admin_id: int,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Ok", "admin": await service.find_by_id(admin_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_admin(
    body: AdminCreate,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Created", "admin": await service.store(body)}


@router.put("/{admin_id}")
async def update_admin(
    admin_id: int,
    body: AdminUpdate,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Updated", "admin": await service.update(admin_id, body)}


@router.put("/{admin_id}/restore")
async def restore_admin(
    admin_id: int,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    restored_id = await service.restore(admin_id)
    return {"message": "The admin was successfully restored", "admin": {"id": restored_id}}


@router.delete("/{admin_id}")
async def destroy_admin(
    admin_id: int,
    service: AdminService = Depends(get_admin_service),
    user: UserRead = Depends(require_admin),
):
    deleted_id = await service.delete(admin_id)
    return {"message": "The admin was successfully deleted", "admin": {"id": deleted_id}}
