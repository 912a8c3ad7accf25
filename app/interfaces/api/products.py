"""Products API routes — public reads, admin-only writes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.application.services.product_service import ProductService
from app.domain.schemas.product import ProductCreate, ProductUpdate
from app.domain.schemas.user import UserRead
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("")
async def list_products(
    page: Optional[int] = Query(None),
    size: Optional[int] = Query(None),
    sort: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
):
    result = await service.find_all(page=page, size=size, sort=sort, status=status, search=search)
    return {"message": "Ok", "products": result["items"], "pagination": result["pagination"]}


@router.get("/{product_id}")
async def show_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return {"message": "Ok", "product": await service.find_by_id(product_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_product(
    body: ProductCreate,
    service: ProductService = Depends(get_product_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Created", "product": await service.store(body)}


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    body: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    user: UserRead = Depends(require_admin),
):
    return {"message": "Updated", "product": await service.update(product_id, body)}


@router.put("/{product_id}/restore")
async def restore_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    user: UserRead = Depends(require_admin),
):
    restored_id = await service.restore(product_id)
    return {"message": "The product was successfully restored", "product": {"id": restored_id}}


@router.delete("/{product_id}")
async def destroy_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    user: UserRead = Depends(require_admin),
):
    deleted_id = await service.delete(product_id)
    return {"message": "The product was successfully deleted", "product": {"id": deleted_id}}
