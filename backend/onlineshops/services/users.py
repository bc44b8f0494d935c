"""Service helpers for user accounts and their saved addresses."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onlineshops.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.core.sanitize import normalize_email
from onlineshops.core.security import hash_password
from onlineshops.models.refresh_token import RefreshToken
from onlineshops.models.user import User
from onlineshops.models.user_address import UserAddress
from onlineshops.schemas.user import AddressCreate, AddressUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def create_user(db: Session, data: UserCreate) -> User:
    email = normalize_email(data.email)
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("Email already registered", details={"email": email})

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        role=data.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered", details={"email": email})
    db.refresh(user)
    logger.info("User created: %s", user.id)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found", details={"user_id": str(user_id)})
    return user


def _revoke_sessions(db: Session, user_id: UUID) -> None:
    (
        db.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )


def update_user(db: Session, user_id: UUID, data: UserUpdate, *, actor: AuthenticatedUser) -> User:
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)

    if ("role" in changes or "is_active" in changes) and not actor.is_admin:
        raise ForbiddenError("Only administrators can change roles or account status")

    password = changes.pop("password", None)
    for field, value in changes.items():
        if value is None and field != "phone":
            continue
        setattr(user, field, value)

    # Credential or status changes end every existing session.
    if password:
        user.password_hash = hash_password(password)
        _revoke_sessions(db, user.id)
    if changes.get("is_active") is False:
        _revoke_sessions(db, user.id)

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User updated: %s fields=%s", user.id, sorted(changes) + (["password"] if password else []))
    return user


def delete_user(db: Session, user_id: UUID) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted: %s", user_id)


def list_addresses(db: Session, user_id: UUID) -> list[UserAddress]:
    get_user(db, user_id)
    return (
        db.query(UserAddress)
        .filter(UserAddress.user_id == user_id)
        .order_by(UserAddress.is_default.desc(), UserAddress.created_at.asc())
        .all()
    )


def _get_address(db: Session, user_id: UUID, address_id: UUID) -> UserAddress:
    address = (
        db.query(UserAddress)
        .filter(UserAddress.id == address_id, UserAddress.user_id == user_id)
        .first()
    )
    if not address:
        raise NotFoundError("Address not found", details={"address_id": str(address_id)})
    return address


def _clear_default(db: Session, user_id: UUID, *, keep: UUID | None = None) -> None:
    query = db.query(UserAddress).filter(UserAddress.user_id == user_id, UserAddress.is_default.is_(True))
    if keep is not None:
        query = query.filter(UserAddress.id != keep)
    query.update({UserAddress.is_default: False}, synchronize_session=False)


def create_address(db: Session, user_id: UUID, data: AddressCreate) -> UserAddress:
    get_user(db, user_id)
    if data.is_default:
        _clear_default(db, user_id)
    address = UserAddress(user_id=user_id, **data.model_dump())
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def update_address(db: Session, user_id: UUID, address_id: UUID, data: AddressUpdate) -> UserAddress:
    address = _get_address(db, user_id, address_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("is_default"):
        _clear_default(db, user_id, keep=address.id)
    for field, value in changes.items():
        if value is None and field != "address_line_2":
            continue
        setattr(address, field, value)
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def delete_address(db: Session, user_id: UUID, address_id: UUID) -> None:
    address = _get_address(db, user_id, address_id)
    db.delete(address)
    db.commit()
