"""Common FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

from fastapi import Depends, Request

from onlineshops.core.exceptions import UnauthorizedError
from onlineshops.core.rbac import AuthenticatedUser, check_permissions, check_roles
from onlineshops.core.security import ACCESS_TOKEN_TYPE, decode_token
from onlineshops.models.enums import Permission, UserRole


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    cleaned = token.strip()
    return cleaned or None


def user_from_access_token(token: str) -> AuthenticatedUser:
    try:
        payload = decode_token(token, token_type=ACCESS_TOKEN_TYPE)
    except ValueError as exc:
        if str(exc) == "expired_token":
            raise UnauthorizedError("Access token has expired", error_code="EXPIRED_TOKEN")
        raise UnauthorizedError("Invalid access token", error_code="INVALID_TOKEN")

    try:
        return AuthenticatedUser(
            user_id=UUID(str(payload.get("sub"))),
            email=str(payload.get("email") or ""),
            role=UserRole(payload.get("role")),
        )
    except ValueError:
        raise UnauthorizedError("Invalid access token", error_code="INVALID_TOKEN")


def get_optional_user(request: Request) -> AuthenticatedUser | None:
    token = _extract_bearer_token(request)
    if not token:
        return None
    return user_from_access_token(token)


def get_current_user(user: AuthenticatedUser | None = Depends(get_optional_user)) -> AuthenticatedUser:
    if user is None:
        raise UnauthorizedError("Not authenticated", error_code="NOT_AUTHENTICATED")
    return user


def authorize(
    *,
    roles: Iterable[UserRole] = (),
    permissions: Iterable[Permission] = (),
):
    """Route guard: any of ``roles`` and all of ``permissions`` must match."""
    allowed_roles = tuple(roles)
    required_permissions = tuple(permissions)

    def _checker(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        check_roles(user, allowed_roles)
        check_permissions(user, required_permissions)
        return user

    return _checker


def require_roles(*required: UserRole):
    return authorize(roles=required)


def require_permissions(*required: Permission):
    return authorize(permissions=required)


admin_only = require_roles(UserRole.admin)
shop_owner_only = require_roles(UserRole.shop_owner, UserRole.admin)
supplier_only = require_roles(UserRole.supplier, UserRole.admin)
