"""Service helpers for shops."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onlineshops.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.core.sanitize import slugify
from onlineshops.models.shop import Shop
from onlineshops.schemas.shop import ShopCreate, ShopUpdate

logger = logging.getLogger(__name__)

SHOP_SLUG_TAKEN = "Shop slug already exists"


def ensure_shop_manager(shop: Shop, actor: AuthenticatedUser) -> None:
    if not actor.is_admin and shop.owner_id != actor.user_id:
        raise ForbiddenError("You can only manage your own shops")


def _ensure_status_change_allowed(changes: dict[str, Any], actor: AuthenticatedUser) -> None:
    if changes.get("status") is not None and not actor.is_admin:
        raise ForbiddenError("Only administrators can change shop status")


def _slug_taken(db: Session, slug: str, *, exclude: UUID | None = None) -> bool:
    query = db.query(Shop.id).filter(Shop.slug == slug)
    if exclude is not None:
        query = query.filter(Shop.id != exclude)
    return query.first() is not None


def _commit_shop(db: Session, shop: Shop) -> Shop:
    db.add(shop)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(SHOP_SLUG_TAKEN, details={"slug": shop.slug})
    db.refresh(shop)
    return shop


def create_shop(db: Session, data: ShopCreate, *, actor: AuthenticatedUser) -> Shop:
    changes = data.model_dump(exclude_unset=True)
    _ensure_status_change_allowed(changes, actor)

    slug = data.slug or slugify(data.name)
    if not slug:
        raise BadRequestError("Shop slug could not be derived from the name", details={"name": data.name})
    if _slug_taken(db, slug):
        raise ConflictError(SHOP_SLUG_TAKEN, details={"slug": slug})

    shop = Shop(
        owner_id=actor.user_id,
        name=data.name,
        slug=slug,
        description=data.description,
        logo_url=data.logo_url,
        banner_url=data.banner_url,
        settings=data.settings.model_dump(mode="json", exclude_none=True) if data.settings else None,
    )
    if data.status is not None:
        shop.status = data.status
    shop = _commit_shop(db, shop)
    logger.info("Shop created: %s (%s) by %s", shop.id, shop.slug, actor.user_id)
    return shop


def list_shops(db: Session, *, owner_id: UUID | None = None) -> list[Shop]:
    query = db.query(Shop)
    if owner_id is not None:
        query = query.filter(Shop.owner_id == owner_id)
    return query.order_by(Shop.created_at.desc()).all()


def get_shop(db: Session, shop_id: UUID) -> Shop:
    shop = db.get(Shop, shop_id)
    if not shop:
        raise NotFoundError("Shop not found", details={"shop_id": str(shop_id)})
    return shop


def get_shop_by_slug(db: Session, slug: str) -> Shop:
    shop = db.query(Shop).filter(Shop.slug == slug).first()
    if not shop:
        raise NotFoundError("Shop not found", details={"slug": slug})
    return shop


def update_shop(db: Session, shop_id: UUID, data: ShopUpdate, *, actor: AuthenticatedUser) -> Shop:
    shop = get_shop(db, shop_id)
    ensure_shop_manager(shop, actor)
    changes = data.model_dump(exclude_unset=True)
    _ensure_status_change_allowed(changes, actor)

    slug = changes.get("slug")
    if slug and slug != shop.slug and _slug_taken(db, slug, exclude=shop.id):
        raise ConflictError(SHOP_SLUG_TAKEN, details={"slug": slug})

    if "settings" in changes:
        changes["settings"] = data.settings.model_dump(mode="json", exclude_none=True) if data.settings else None
    for field, value in changes.items():
        if value is None and field not in {"description", "logo_url", "banner_url", "settings"}:
            continue
        setattr(shop, field, value)

    shop = _commit_shop(db, shop)
    logger.info("Shop updated: %s fields=%s", shop.id, sorted(changes))
    return shop


def delete_shop(db: Session, shop_id: UUID) -> None:
    shop = get_shop(db, shop_id)
    db.delete(shop)
    db.commit()
    logger.info("Shop deleted: %s", shop_id)
