"""
API Dependencies — one service instance per request, sharing the process pool.
"""

from fastapi import Depends

from app.application.services.admin_service import AdminService
from app.application.services.category_service import CategoryService
from app.application.services.product_service import ProductService
from app.application.services.user_service import UserService
from app.infrastructure.database import ConnectionPool, get_pool


def get_admin_service(pool: ConnectionPool = Depends(get_pool)) -> AdminService:
    return AdminService(pool)


def get_user_service(pool: ConnectionPool = Depends(get_pool)) -> UserService:
    return UserService(pool)


def get_category_service(pool: ConnectionPool = Depends(get_pool)) -> CategoryService:
    return CategoryService(pool)


def get_product_service(pool: ConnectionPool = Depends(get_pool)) -> ProductService:
    return ProductService(pool)
