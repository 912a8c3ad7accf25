"""Pydantic schemas for User accounts."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
NAME_PATTERN = re.compile(r"[^\W\d_]+(?:[\s.'-][^\W\d_]+)*\.?")


def clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = " ".join(value.split())
    if not NAME_PATTERN.fullmatch(value):
        raise ValueError("contains invalid characters")
    return " ".join(word.capitalize() for word in value.split(" "))


def clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if not EMAIL_PATTERN.fullmatch(value):
        raise ValueError("The email format is invalid")
    return value


class UserBase(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: str = Field(min_length=5, max_length=64)

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_names(cls, value):
        return clean_name(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return clean_email(value)


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=16)


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    email: Optional[str] = Field(default=None, min_length=5, max_length=64)
    password: Optional[str] = Field(default=None, min_length=8, max_length=16)

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_names(cls, value):
        return clean_name(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return clean_email(value)


class UserRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    user_role_id: Optional[int] = None
    user_role: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8, max_length=16)
