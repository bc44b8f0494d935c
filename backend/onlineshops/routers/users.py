"""User management endpoints, including saved addresses."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from onlineshops.core.deps import admin_only, require_permissions
from onlineshops.core.rate_limit import rate_limit
from onlineshops.core.rbac import AuthenticatedUser, ensure_self_or_admin
from onlineshops.db.session import get_db
from onlineshops.models.enums import Permission
from onlineshops.schemas.user import AddressCreate, AddressOut, AddressUpdate, UserCreate, UserOut, UserUpdate
from onlineshops.services import users as users_service

router = APIRouter(dependencies=[Depends(rate_limit())])

ADDRESS_ACCESS_DENIED = "You can only access your own addresses"


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(admin_only)])
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserOut:
    return UserOut.model_validate(users_service.create_user(db, payload))


@router.get("", response_model=list[UserOut], dependencies=[Depends(admin_only)])
def list_users(db: Session = Depends(get_db)) -> list[UserOut]:
    return [UserOut.model_validate(u) for u in users_service.list_users(db)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: UUID,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_read)),
    db: Session = Depends(get_db),
) -> UserOut:
    ensure_self_or_admin(current_user, user_id)
    return UserOut.model_validate(users_service.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_update)),
    db: Session = Depends(get_db),
) -> UserOut:
    ensure_self_or_admin(current_user, user_id)
    return UserOut.model_validate(users_service.update_user(db, user_id, payload, actor=current_user))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(admin_only)],
)
def delete_user(user_id: UUID, db: Session = Depends(get_db)) -> Response:
    users_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/addresses", response_model=list[AddressOut])
def list_addresses(
    user_id: UUID,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_read)),
    db: Session = Depends(get_db),
) -> list[AddressOut]:
    ensure_self_or_admin(current_user, user_id, ADDRESS_ACCESS_DENIED)
    return [AddressOut.model_validate(a) for a in users_service.list_addresses(db, user_id)]


@router.post("/{user_id}/addresses", response_model=AddressOut, status_code=status.HTTP_201_CREATED)
def create_address(
    user_id: UUID,
    payload: AddressCreate,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_update)),
    db: Session = Depends(get_db),
) -> AddressOut:
    ensure_self_or_admin(current_user, user_id, ADDRESS_ACCESS_DENIED)
    return AddressOut.model_validate(users_service.create_address(db, user_id, payload))


@router.patch("/{user_id}/addresses/{address_id}", response_model=AddressOut)
def update_address(
    user_id: UUID,
    address_id: UUID,
    payload: AddressUpdate,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_update)),
    db: Session = Depends(get_db),
) -> AddressOut:
    ensure_self_or_admin(current_user, user_id, ADDRESS_ACCESS_DENIED)
    return AddressOut.model_validate(users_service.update_address(db, user_id, address_id, payload))


@router.delete(
    "/{user_id}/addresses/{address_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
def delete_address(
    user_id: UUID,
    address_id: UUID,
    current_user: AuthenticatedUser = Depends(require_permissions(Permission.user_update)),
    db: Session = Depends(get_db),
) -> Response:
    ensure_self_or_admin(current_user, user_id, ADDRESS_ACCESS_DENIED)
    users_service.delete_address(db, user_id, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
