"""Convenience imports for Alembic metadata discovery."""

from onlineshops.models.user import User
from onlineshops.models.user_address import UserAddress
from onlineshops.models.refresh_token import RefreshToken
from onlineshops.models.shop import Shop
from onlineshops.models.product import Product

__all__ = ["User", "UserAddress", "RefreshToken", "Shop", "Product"]
