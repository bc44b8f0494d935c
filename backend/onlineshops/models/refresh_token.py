"""Refresh token model used for JWT session rotation and revocation."""

from __future__ import annotations

import datetime as dt
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from onlineshops.db.base import Base, TimestampMixin, utcnow


class RefreshToken(TimestampMixin, Base):
    """One row per issued refresh token.

    The row id is embedded in the signed token as ``tokenId``, which makes
    this row (not the JWT) the source of truth for whether the token may
    still be exchanged. Rows are only ever mutated to flip ``is_revoked``
    to true.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    expires_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    device_info: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    def is_expired_at(self, now: dt.datetime) -> bool:
        return now > self.expires_at

    @property
    def is_expired(self) -> bool:
        return self.is_expired_at(utcnow())

    @property
    def is_valid(self) -> bool:
        return not self.is_revoked and not self.is_expired
