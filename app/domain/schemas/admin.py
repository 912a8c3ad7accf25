"""Pydantic schemas for Admin accounts (a user plus admin capabilities)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.domain.schemas.user import UserCreate, UserUpdate


class AdminCreate(UserCreate):
    is_super: bool = False


class AdminUpdate(UserUpdate):
    is_super: Optional[bool] = None


class AdminRead(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    is_super: bool
    user_role: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
