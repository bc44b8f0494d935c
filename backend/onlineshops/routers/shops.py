"""Shop endpoints: public browsing, owner management, admin removal."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from onlineshops.core.deps import authorize, shop_owner_only
from onlineshops.core.rate_limit import rate_limit
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.db.session import get_db
from onlineshops.models.enums import Permission
from onlineshops.schemas.shop import ShopCreate, ShopOut, ShopUpdate
from onlineshops.services import shops as shops_service

router = APIRouter(dependencies=[Depends(rate_limit())])


@router.post("", response_model=ShopOut, status_code=status.HTTP_201_CREATED)
def create_shop(
    payload: ShopCreate,
    current_user: AuthenticatedUser = Depends(authorize(permissions=[Permission.shop_create])),
    db: Session = Depends(get_db),
) -> ShopOut:
    return ShopOut.model_validate(shops_service.create_shop(db, payload, actor=current_user))


@router.get("", response_model=list[ShopOut])
def list_shops(db: Session = Depends(get_db)) -> list[ShopOut]:
    return [ShopOut.model_validate(s) for s in shops_service.list_shops(db)]


@router.get("/mine", response_model=list[ShopOut])
def list_my_shops(
    current_user: AuthenticatedUser = Depends(shop_owner_only),
    db: Session = Depends(get_db),
) -> list[ShopOut]:
    return [ShopOut.model_validate(s) for s in shops_service.list_shops(db, owner_id=current_user.user_id)]


@router.get("/slug/{slug}", response_model=ShopOut)
def get_shop_by_slug(slug: str, db: Session = Depends(get_db)) -> ShopOut:
    return ShopOut.model_validate(shops_service.get_shop_by_slug(db, slug))


@router.get("/{shop_id}", response_model=ShopOut)
def get_shop(shop_id: UUID, db: Session = Depends(get_db)) -> ShopOut:
    return ShopOut.model_validate(shops_service.get_shop(db, shop_id))


@router.patch("/{shop_id}", response_model=ShopOut)
def update_shop(
    shop_id: UUID,
    payload: ShopUpdate,
    current_user: AuthenticatedUser = Depends(authorize(permissions=[Permission.shop_update])),
    db: Session = Depends(get_db),
) -> ShopOut:
    return ShopOut.model_validate(shops_service.update_shop(db, shop_id, payload, actor=current_user))


@router.delete(
    "/{shop_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(authorize(permissions=[Permission.shop_delete]))],
)
def delete_shop(shop_id: UUID, db: Session = Depends(get_db)) -> Response:
    shops_service.delete_shop(db, shop_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
