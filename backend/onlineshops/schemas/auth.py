"""Auth-related schemas (register, login, refresh, sessions)."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from onlineshops.core.sanitize import clean_email, clean_single_line, has_control_chars
from onlineshops.models.enums import UserRole
from onlineshops.schemas.common import CamelModel
from onlineshops.schemas.user import UserCreate, UserOut

SELF_SERVICE_ROLES = frozenset({UserRole.shopper, UserRole.shop_owner, UserRole.supplier})


class RegisterRequest(UserCreate):
    @field_validator("role")
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value not in SELF_SERVICE_ROLES:
            raise ValueError("role_not_allowed")
        return value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return clean_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if has_control_chars(value):
            raise ValueError("password_contains_control_chars")
        return value


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1)

    @field_validator("refresh_token", mode="before")
    @classmethod
    def normalize_refresh_token(cls, value: str) -> str:
        return clean_single_line(value)


class TokenPairOut(CamelModel):
    access_token: str
    refresh_token: str
    expires_in: int


class AuthResponse(TokenPairOut):
    user: UserOut


class SessionOut(CamelModel):
    id: UUID
    device_info: str | None = None
    ip_address: str | None = None
    created_at: dt.datetime
