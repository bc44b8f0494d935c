from __future__ import annotations

from uuid import uuid4

import pytest

from onlineshops.core.exceptions import ForbiddenError
from onlineshops.core.rbac import (
    ROLE_PERMISSIONS,
    AuthenticatedUser,
    check_permissions,
    check_roles,
    ensure_self_or_admin,
    get_role_permissions,
    role_has_permission,
)
from onlineshops.models.enums import Permission, UserRole


def _user(role: UserRole) -> AuthenticatedUser:
    return AuthenticatedUser(user_id=uuid4(), email=f"{role.value}@example.com", role=role)


def test_rbac_permissions_matrix_smoke() -> None:
    assert role_has_permission(UserRole.shopper, Permission.order_create)
    assert not role_has_permission(UserRole.shopper, Permission.shop_create)
    assert role_has_permission(UserRole.shop_owner, Permission.inventory_update)
    assert role_has_permission(UserRole.supplier, Permission.supplier_order_update)
    assert not role_has_permission(UserRole.supplier, Permission.supplier_order_create)
    assert not role_has_permission(UserRole.supplier, Permission.cart_update)
    assert role_has_permission("admin", "admin:manage_users")


def test_shop_owner_is_superset_of_shopper() -> None:
    assert get_role_permissions(UserRole.shopper) < get_role_permissions(UserRole.shop_owner)


def test_admin_holds_every_permission() -> None:
    assert get_role_permissions(UserRole.admin) == frozenset(Permission)
    check_permissions(_user(UserRole.admin), list(Permission))


def test_unknown_role_or_permission_is_denied() -> None:
    assert get_role_permissions("guest") == frozenset()
    assert not role_has_permission(UserRole.admin, "shop:teleport")


def test_role_table_is_immutable() -> None:
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS[UserRole.shopper] = frozenset(Permission)  # type: ignore[index]
    assert isinstance(ROLE_PERMISSIONS[UserRole.shopper], frozenset)


def test_check_permissions_requires_all() -> None:
    owner = _user(UserRole.shop_owner)
    check_permissions(owner, [Permission.shop_update, Permission.product_create])

    with pytest.raises(ForbiddenError) as exc:
        check_permissions(owner, [Permission.shop_update, Permission.shop_delete])
    assert exc.value.status_code == 403
    assert exc.value.details["missing_permissions"] == ["shop:delete"]


def test_check_permissions_without_user_is_forbidden() -> None:
    with pytest.raises(ForbiddenError) as exc:
        check_permissions(None, [Permission.product_read])
    assert exc.value.message == "User not authenticated"

    check_permissions(None, [])


def test_check_roles_accepts_any_listed_role() -> None:
    check_roles(_user(UserRole.supplier), [UserRole.supplier, UserRole.admin])
    check_roles(_user(UserRole.shopper), [])

    with pytest.raises(ForbiddenError):
        check_roles(_user(UserRole.shopper), [UserRole.supplier, UserRole.admin])
    with pytest.raises(ForbiddenError):
        check_roles(None, [UserRole.shopper])


def test_ensure_self_or_admin() -> None:
    shopper = _user(UserRole.shopper)
    ensure_self_or_admin(shopper, shopper.user_id)
    ensure_self_or_admin(_user(UserRole.admin), shopper.user_id)

    with pytest.raises(ForbiddenError):
        ensure_self_or_admin(shopper, uuid4())
