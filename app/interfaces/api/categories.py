"""Categories API routes — public reads, admin-only writes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.application.services.category_service import CategoryService
from app.domain.schemas.category import CategoryCreate, CategoryUpdate
from app.domain.schemas.user import UserRead
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("")
async def list_categories(
    page: Optional[int] = Query(None),
    size: Optional[int] = Query(None),
    sort: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    service: CategoryService = Depends(get_category_service),
):
    result = await service.find_all(page=page, size=size, sort=sort, status=status, search=search)
    return {"message": "Ok", "categories": result["items"], "pagination": result["pagination"]}


@router.get("/{category_id}")
async def show_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    return {"message": "Ok", "category": await service.find_by_id(category_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_category(
    body: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Created", "category": await service.store(body)}


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Updated", "category": await service.update(category_id, body)}


@router.put("/{category_id}/restore")
async def restore_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
    user: UserRead = Depends(require_admin),
):
    restored_id = await service.restore(category_id)
    return {"message": "The category was successfully restored", "category": {"id": restored_id}}


@router.delete("/{category_id}")
async def destroy_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
    user: UserRead = Depends(require_admin),
):
    deleted_id = await service.delete(category_id)
    return {"message": "The category was successfully deleted", "category": {"id": deleted_id}}
