"""Shops owned by shop-owner accounts."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from onlineshops.db.base import Base, JSONType, TimestampMixin
from onlineshops.models.enums import ShopStatus


class Shop(TimestampMixin, Base):
    __tablename__ = "shops"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    owner_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    banner_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[ShopStatus] = mapped_column(
        Enum(ShopStatus, name="shop_status", values_callable=lambda x: [e.value for e in x]),
        default=ShopStatus.pending,
        nullable=False,
    )
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    owner = relationship("User", back_populates="shops")
    products = relationship(
        "Product",
        back_populates="shop",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
