"""Pydantic schemas for shops."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator

from onlineshops.core.sanitize import SLUG_PATTERN, clean_optional, clean_single_line
from onlineshops.models.enums import ShopStatus
from onlineshops.schemas.common import CamelModel


class ShopSettings(CamelModel):
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    timezone: str | None = Field(default=None, max_length=64)
    order_notifications: bool | None = None
    auto_accept_orders: bool | None = None
    minimum_order_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class ShopCreate(CamelModel):
    name: str = Field(min_length=2, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    logo_url: str | None = Field(default=None, max_length=500)
    banner_url: str | None = Field(default=None, max_length=500)
    status: ShopStatus | None = None
    settings: ShopSettings | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("slug", "logo_url", "banner_url", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class ShopUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    logo_url: str | None = Field(default=None, max_length=500)
    banner_url: str | None = Field(default=None, max_length=500)
    status: ShopStatus | None = None
    settings: ShopSettings | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str | None) -> str | None:
        return None if value is None else clean_single_line(value)

    @field_validator("slug", "logo_url", "banner_url", mode="before")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return clean_optional(value)


class ShopOut(CamelModel):
    id: UUID
    owner_id: UUID
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    status: ShopStatus
    settings: ShopSettings | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
