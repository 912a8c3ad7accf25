"""Pydantic schemas for Product domain."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class ProductBase(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    featured: bool = False
    active: bool = True
    category_id: Optional[int] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    slug: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None
    category_id: Optional[int] = None


class ProductAttributeRead(BaseModel):
    title: str
    value: str


class ProductImageRead(BaseModel):
    id: int
    url: str


class ProductRead(BaseModel):
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    featured: bool
    active: bool
    category_id: Optional[int] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    attributes: List[ProductAttributeRead] = []
    images: List[ProductImageRead] = []

    model_config = {"from_attributes": True}
