"""Service helpers for products and their stock level."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onlineshops.core.exceptions import BadRequestError, ConflictError, NotFoundError
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.core.sanitize import slugify
from onlineshops.models.enums import ProductStatus
from onlineshops.models.product import Product
from onlineshops.schemas.product import ProductCreate, ProductUpdate
from onlineshops.services.shops import ensure_shop_manager, get_shop

logger = logging.getLogger(__name__)

PRODUCT_SKU_TAKEN = "Product SKU already exists"
PRODUCT_SLUG_TAKEN = "Product slug already exists"


def _taken(db: Session, column, value: str, *, exclude: UUID | None = None) -> bool:
    query = db.query(Product.id).filter(column == value)
    if exclude is not None:
        query = query.filter(Product.id != exclude)
    return query.first() is not None


def _ensure_unique(db: Session, *, sku: str | None, slug: str | None, exclude: UUID | None = None) -> None:
    if sku and _taken(db, Product.sku, sku, exclude=exclude):
        raise ConflictError(PRODUCT_SKU_TAKEN, details={"sku": sku})
    if slug and _taken(db, Product.slug, slug, exclude=exclude):
        raise ConflictError(PRODUCT_SLUG_TAKEN, details={"slug": slug})


def _commit_product(db: Session, product: Product) -> Product:
    db.add(product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            "Product SKU or slug already exists",
            details={"sku": product.sku, "slug": product.slug},
        )
    db.refresh(product)
    return product


def create_product(db: Session, data: ProductCreate, *, actor: AuthenticatedUser) -> Product:
    shop = get_shop(db, data.shop_id)
    ensure_shop_manager(shop, actor)

    slug = data.slug or slugify(data.name)
    if not slug:
        raise BadRequestError("Product slug could not be derived from the name", details={"name": data.name})
    _ensure_unique(db, sku=data.sku, slug=slug)

    product = Product(**data.model_dump(exclude={"slug"}), slug=slug)
    product = _commit_product(db, product)
    logger.info("Product created: %s (sku=%s) in shop %s", product.id, product.sku, shop.id)
    return product


def list_products(
    db: Session,
    *,
    shop_id: UUID | None = None,
    status: ProductStatus | None = None,
    search: str | None = None,
) -> list[Product]:
    query = db.query(Product)
    if shop_id is not None:
        query = query.filter(Product.shop_id == shop_id)
    if status is not None:
        query = query.filter(Product.status == status)
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))
    return query.order_by(Product.created_at.desc()).all()


def get_product(db: Session, product_id: UUID) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found", details={"product_id": str(product_id)})
    return product


def _get_managed_product(db: Session, product_id: UUID, actor: AuthenticatedUser) -> Product:
    product = get_product(db, product_id)
    ensure_shop_manager(product.shop, actor)
    return product


def update_product(db: Session, product_id: UUID, data: ProductUpdate, *, actor: AuthenticatedUser) -> Product:
    product = _get_managed_product(db, product_id, actor)
    changes = data.model_dump(exclude_unset=True)
    _ensure_unique(db, sku=changes.get("sku"), slug=changes.get("slug"), exclude=product.id)

    for field, value in changes.items():
        if value is None and field not in {"description", "compare_price", "images"}:
            continue
        setattr(product, field, value)

    product = _commit_product(db, product)
    logger.info("Product updated: %s fields=%s", product.id, sorted(changes))
    return product


def delete_product(db: Session, product_id: UUID, *, actor: AuthenticatedUser) -> None:
    product = _get_managed_product(db, product_id, actor)
    db.delete(product)
    db.commit()
    logger.info("Product deleted: %s", product_id)


def adjust_stock(db: Session, product_id: UUID, quantity: int, *, actor: AuthenticatedUser) -> Product:
    """Apply a signed stock change; the level never drops below zero."""
    product = _get_managed_product(db, product_id, actor)
    product.stock_qty = max(0, product.stock_qty + quantity)
    if product.stock_qty == 0:
        product.status = ProductStatus.out_of_stock
    elif product.status == ProductStatus.out_of_stock:
        product.status = ProductStatus.active
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Stock adjusted for product %s by %s (now %s)", product.id, quantity, product.stock_qty)
    return product
