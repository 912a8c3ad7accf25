"""Pydantic schemas for Category domain."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    title: str = Field(min_length=2, max_length=100)


class CategoryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=100)


class CategoryRead(BaseModel):
    id: int
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
