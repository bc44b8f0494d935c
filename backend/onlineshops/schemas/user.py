"""Pydantic schemas for user payloads and responses."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from onlineshops.core.sanitize import clean_email, clean_optional, clean_single_line, has_control_chars
from onlineshops.models.enums import UserRole
from onlineshops.schemas.common import CamelModel

MAX_NAME_LEN = 100


def _validate_password(value: str) -> str:
    if has_control_chars(value):
        raise ValueError("password_contains_control_chars")
    if not value.strip():
        raise ValueError("password_required")
    return value


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=MAX_NAME_LEN)
    last_name: str = Field(min_length=1, max_length=MAX_NAME_LEN)
    phone: str | None = Field(default=None, max_length=20)
    role: UserRole = UserRole.shopper

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return clean_email(value)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value: str | None) -> str | None:
        return clean_optional(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _validate_password(value)


class UserUpdate(CamelModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LEN)
    last_name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LEN)
    phone: str | None = Field(default=None, max_length=20)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def normalize_name(cls, value: str | None) -> str | None:
        return None if value is None else clean_single_line(value)

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value: str | None) -> str | None:
        return clean_optional(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        return None if value is None else _validate_password(value)


class UserOut(CamelModel):
    id: UUID
    email: EmailStr
    first_name: str
    last_name: str
    phone: str | None = None
    role: UserRole
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class AddressCreate(CamelModel):
    label: str = Field(min_length=1, max_length=50)
    address_line_1: str = Field(min_length=1, max_length=255)
    address_line_2: str | None = Field(default=None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)
    country: str = Field(min_length=1, max_length=100)
    is_default: bool = False

    @field_validator("label", "address_line_1", "city", "state", "postal_code", "country", mode="before")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("address_line_2", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class AddressUpdate(CamelModel):
    label: str | None = Field(default=None, min_length=1, max_length=50)
    address_line_1: str | None = Field(default=None, min_length=1, max_length=255)
    address_line_2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    postal_code: str | None = Field(default=None, min_length=1, max_length=20)
    country: str | None = Field(default=None, min_length=1, max_length=100)
    is_default: bool | None = None

    @field_validator("label", "address_line_1", "city", "state", "postal_code", "country", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return None if value is None else clean_single_line(value)

    @field_validator("address_line_2", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class AddressOut(CamelModel):
    id: UUID
    user_id: UUID
    label: str
    address_line_1: str
    address_line_2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool
    created_at: dt.datetime
