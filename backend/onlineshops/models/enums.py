"""Shared enum values used by the database models, schemas and RBAC policy."""

from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    shopper = "shopper"
    shop_owner = "shop_owner"
    supplier = "supplier"
    admin = "admin"


class Permission(str, enum.Enum):
    # Users
    user_read = "user:read"
    user_create = "user:create"
    user_update = "user:update"
    user_delete = "user:delete"

    # Shops
    shop_read = "shop:read"
    shop_create = "shop:create"
    shop_update = "shop:update"
    shop_delete = "shop:delete"
    shop_manage_staff = "shop:manage_staff"

    # Products
    product_read = "product:read"
    product_create = "product:create"
    product_update = "product:update"
    product_delete = "product:delete"

    # Orders
    order_read = "order:read"
    order_create = "order:create"
    order_update = "order:update"
    order_cancel = "order:cancel"

    # Carts
    cart_read = "cart:read"
    cart_update = "cart:update"

    # Reviews
    review_read = "review:read"
    review_create = "review:create"
    review_update = "review:update"
    review_delete = "review:delete"

    # Suppliers
    supplier_read = "supplier:read"
    supplier_create = "supplier:create"
    supplier_update = "supplier:update"
    supplier_delete = "supplier:delete"
    supplier_order_create = "supplier_order:create"
    supplier_order_update = "supplier_order:update"

    # Inventory
    inventory_read = "inventory:read"
    inventory_update = "inventory:update"

    # Analytics
    analytics_read = "analytics:read"
    analytics_export = "analytics:export"

    # Administration
    admin_access = "admin:access"
    admin_manage_users = "admin:manage_users"
    admin_manage_shops = "admin:manage_shops"
    admin_view_all_orders = "admin:view_all_orders"


class ShopStatus(str, enum.Enum):
    pending = "pending"
    active = "active"
    suspended = "suspended"
    closed = "closed"


class ProductStatus(str, enum.Enum):
    draft = "draft"
    active = "active"
    out_of_stock = "out_of_stock"
    discontinued = "discontinued"
