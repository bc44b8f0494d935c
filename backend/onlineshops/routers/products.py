"""Product catalogue endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from onlineshops.core.deps import authorize
from onlineshops.core.rate_limit import rate_limit
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.db.session import get_db
from onlineshops.models.enums import Permission, ProductStatus
from onlineshops.schemas.product import ProductCreate, ProductOut, ProductUpdate, StockAdjustment
from onlineshops.services import products as products_service

router = APIRouter(dependencies=[Depends(rate_limit())])


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    current_user: AuthenticatedUser = Depends(authorize(permissions=[Permission.product_create])),
    db: Session = Depends(get_db),
) -> ProductOut:
    return ProductOut.model_validate(products_service.create_product(db, payload, actor=current_user))


@router.get("", response_model=list[ProductOut])
def list_products(
    shop_id: UUID | None = Query(default=None, alias="shopId"),
    product_status: ProductStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
) -> list[ProductOut]:
    products = products_service.list_products(
        db,
        shop_id=shop_id,
        status=product_status,
        search=search.strip() if search else None,
    )
    return [ProductOut.model_validate(p) for p in products]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: Session = Depends(get_db)) -> ProductOut:
    return ProductOut.model_validate(products_service.get_product(db, product_id))


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    current_user: AuthenticatedUser = Depends(authorize(permissions=[Permission.product_update])),
    db: Session = Depends(get_db),
) -> ProductOut:
    return ProductOut.model_validate(products_service.update_product(db, product_id, payload, actor=current_user))


@router.post("/{product_id}/stock", response_model=ProductOut)
def adjust_stock(
    product_id: UUID,
    payload: StockAdjustment,
    current_user: AuthenticatedUser = Depends(
        authorize(permissions=[Permission.product_update, Permission.inventory_update])
    ),
    db: Session = Depends(get_db),
) -> ProductOut:
    return ProductOut.model_validate(
        products_service.adjust_stock(db, product_id, payload.quantity, actor=current_user)
    )


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
def delete_product(
    product_id: UUID,
    current_user: AuthenticatedUser = Depends(authorize(permissions=[Permission.product_delete])),
    db: Session = Depends(get_db),
) -> Response:
    products_service.delete_product(db, product_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
