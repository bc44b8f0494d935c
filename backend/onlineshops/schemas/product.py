"""Pydantic schemas for products and stock adjustments."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator

from onlineshops.core.sanitize import SLUG_PATTERN, clean_optional, clean_single_line
from onlineshops.models.enums import ProductStatus
from onlineshops.schemas.common import CamelModel

MAX_IMAGES = 20


class ProductCreate(CamelModel):
    shop_id: UUID
    name: str = Field(min_length=2, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    compare_price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    sku: str = Field(min_length=1, max_length=100)
    stock_qty: int = Field(default=0, ge=0)
    images: list[str] | None = Field(default=None, max_length=MAX_IMAGES)
    status: ProductStatus = ProductStatus.draft

    @field_validator("name", "sku", mode="before")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, value: str | None) -> str | None:
        return clean_optional(value)


class ProductUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    compare_price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    sku: str | None = Field(default=None, min_length=1, max_length=100)
    stock_qty: int | None = Field(default=None, ge=0)
    images: list[str] | None = Field(default=None, max_length=MAX_IMAGES)
    status: ProductStatus | None = None

    @field_validator("name", "sku", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return None if value is None else clean_single_line(value)

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, value: str | None) -> str | None:
        return clean_optional(value)


class StockAdjustment(CamelModel):
    quantity: int = Field(description="Signed change applied to the current stock level")


class ProductOut(CamelModel):
    id: UUID
    shop_id: UUID
    name: str
    slug: str
    description: str | None = None
    price: Decimal
    compare_price: Decimal | None = None
    sku: str
    stock_qty: int
    images: list[str] | None = None
    status: ProductStatus
    is_on_sale: bool
    is_in_stock: bool
    created_at: dt.datetime
    updated_at: dt.datetime
