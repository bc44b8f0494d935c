"""Centralized RBAC policy: the static role -> permission table and its checks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
from uuid import UUID

from onlineshops.core.exceptions import ForbiddenError
from onlineshops.models.enums import Permission, UserRole


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity rebuilt from verified access-token claims."""

    user_id: UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


_SHOPPER = frozenset(
    {
        # Browse and shop
        Permission.product_read,
        Permission.shop_read,
        Permission.review_read,
        Permission.cart_read,
        Permission.cart_update,
        Permission.order_read,
        Permission.order_create,
        Permission.order_cancel,
        Permission.review_create,
        Permission.review_update,
        # Own profile
        Permission.user_read,
        Permission.user_update,
    }
)

_SHOP_OWNER = _SHOPPER | {
    Permission.shop_create,
    Permission.shop_update,
    Permission.shop_manage_staff,
    Permission.product_create,
    Permission.product_update,
    Permission.product_delete,
    Permission.order_update,
    Permission.inventory_read,
    Permission.inventory_update,
    Permission.supplier_read,
    Permission.supplier_order_create,
    Permission.supplier_order_update,
    Permission.analytics_read,
}

_SUPPLIER = frozenset(
    {
        Permission.product_read,
        Permission.shop_read,
        Permission.user_read,
        Permission.user_update,
        Permission.supplier_read,
        Permission.supplier_update,
        # Catalog
        Permission.product_create,
        Permission.product_update,
        Permission.product_delete,
        Permission.inventory_read,
        Permission.inventory_update,
        # Fulfillment
        Permission.supplier_order_update,
        Permission.analytics_read,
    }
)

ROLE_PERMISSIONS: Mapping[UserRole, frozenset[Permission]] = MappingProxyType(
    {
        UserRole.shopper: _SHOPPER,
        UserRole.shop_owner: frozenset(_SHOP_OWNER),
        UserRole.supplier: _SUPPLIER,
        UserRole.admin: frozenset(Permission),
    }
)


def get_role_permissions(role: UserRole | str) -> frozenset[Permission]:
    try:
        return ROLE_PERMISSIONS.get(UserRole(role), frozenset())
    except ValueError:
        return frozenset()


def role_has_permission(role: UserRole | str, permission: Permission | str) -> bool:
    try:
        return Permission(permission) in get_role_permissions(role)
    except ValueError:
        return False


def check_permissions(user: AuthenticatedUser | None, required: Iterable[Permission]) -> None:
    """Require every permission in ``required`` (conjunction)."""
    required = list(required)
    if not required:
        return
    if user is None:
        raise ForbiddenError("User not authenticated")
    granted = get_role_permissions(user.role)
    missing = [permission for permission in required if Permission(permission) not in granted]
    if missing:
        raise ForbiddenError(
            "You do not have permission to perform this action",
            details={"missing_permissions": [Permission(p).value for p in missing]},
        )


def check_roles(user: AuthenticatedUser | None, allowed: Iterable[UserRole]) -> None:
    """Require membership in any one of ``allowed`` (disjunction)."""
    allowed = {UserRole(role) for role in allowed}
    if not allowed:
        return
    if user is None:
        raise ForbiddenError("User not authenticated")
    if user.role not in allowed:
        raise ForbiddenError("Insufficient role for this action")


def ensure_self_or_admin(user: AuthenticatedUser, target_user_id: UUID, message: str = "You can only access your own account") -> None:
    if not user.is_admin and user.user_id != target_user_id:
        raise ForbiddenError(message)
