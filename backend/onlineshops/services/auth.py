"""Session and credential management: token issuance, rotation and revocation.

Every successful login, registration or refresh mints a *credential pair*: a
short-lived access token and a refresh token backed by one ``refresh_tokens``
row. The refresh token can be exchanged exactly once; the exchange revokes its
row and mints a new pair. Presenting a revoked refresh token again is treated
as evidence of theft and tears down every session of the user.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from onlineshops.core.config import settings
from onlineshops.core.exceptions import UnauthorizedError
from onlineshops.core.sanitize import normalize_email
from onlineshops.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    pwd_context,
    verify_password,
)
from onlineshops.db.base import utcnow
from onlineshops.models.refresh_token import RefreshToken
from onlineshops.models.user import User
from onlineshops.schemas.user import UserCreate
from onlineshops.services.users import create_user

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
REVOKED_REFRESH_TOKEN = "Refresh token has been revoked. Please login again."
EXPIRED_REFRESH_TOKEN = "Refresh token has expired. Please login again."


@dataclass(frozen=True)
class CredentialPair:
    access_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class AuthResult:
    tokens: CredentialPair
    user: User


@dataclass(frozen=True)
class RefreshClaims:
    user_id: UUID
    token_id: UUID


@dataclass(frozen=True)
class SessionSummary:
    id: UUID
    device_info: str | None
    ip_address: str | None
    created_at: dt.datetime


def _refresh_expiry(now: dt.datetime) -> dt.datetime:
    return now + dt.timedelta(seconds=settings.refresh_token_ttl_seconds)


def _truncate(value: str | None, limit: int) -> str | None:
    return value[:limit] if value else None


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def mint_credential_pair(
    db: Session,
    user: User,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> CredentialPair:
    # The record id is chosen before signing so the token can embed it and
    # the row is written once, already holding its final token string.
    token_id = uuid4()
    now = utcnow()

    access_token = create_access_token(
        {"sub": str(user.id), "email": user.email, "role": user.role.value},
    )
    refresh_token = create_refresh_token(
        {"sub": str(user.id), "tokenId": str(token_id)},
    )

    db.add(
        RefreshToken(
            id=token_id,
            user_id=user.id,
            token=refresh_token,
            expires_at=_refresh_expiry(now),
            device_info=_truncate(device_info, 255),
            ip_address=_truncate(ip_address, 45),
        )
    )
    db.commit()
    return CredentialPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_ttl_seconds,
    )


def register(
    db: Session,
    payload: UserCreate,
    *,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> AuthResult:
    user = create_user(db, payload)
    tokens = mint_credential_pair(db, user, device_info, ip_address)
    logger.info("User registered: %s (%s)", user.id, user.role.value)
    return AuthResult(tokens=tokens, user=user)


def validate_user(db: Session, email: str, password: str) -> User:
    """Check credentials; every failure raises the same generic error."""
    user = find_user_by_email(db, email)
    if not user:
        # Hash anyway: latency must match the wrong-password path.
        pwd_context.dummy_verify()
        logger.warning("Login failed: unknown email")
        raise UnauthorizedError(INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: invalid password for user %s", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
    if not user.is_active:
        logger.warning("Login failed: inactive user %s", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
    return user


def validate_user_by_id(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise UnauthorizedError("User not found", error_code="USER_NOT_FOUND")
    return user


def login(
    db: Session,
    email: str,
    password: str,
    *,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> AuthResult:
    user = validate_user(db, email, password)
    tokens = mint_credential_pair(db, user, device_info, ip_address)
    logger.info("User authenticated: %s", user.id)
    return AuthResult(tokens=tokens, user=user)


def decode_refresh_token(refresh_token: str) -> RefreshClaims:
    try:
        payload = decode_token(refresh_token, token_type=REFRESH_TOKEN_TYPE)
    except ValueError as exc:
        if str(exc) == "expired_token":
            raise UnauthorizedError(EXPIRED_REFRESH_TOKEN, error_code="EXPIRED_TOKEN")
        raise UnauthorizedError(INVALID_REFRESH_TOKEN, error_code="INVALID_TOKEN")

    try:
        return RefreshClaims(
            user_id=UUID(str(payload.get("sub"))),
            token_id=UUID(str(payload.get("tokenId"))),
        )
    except ValueError:
        raise UnauthorizedError(INVALID_REFRESH_TOKEN, error_code="INVALID_TOKEN")


def _revoke_all_user_tokens(db: Session, user_id: UUID) -> int:
    revoked = (
        db.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )
    db.commit()
    return revoked


def _handle_token_reuse(db: Session, user_id: UUID, token_id: UUID) -> UnauthorizedError:
    revoked = _revoke_all_user_tokens(db, user_id)
    logger.warning(
        "Refresh token reuse detected for user %s (token %s); revoked %s active sessions",
        user_id,
        token_id,
        revoked,
    )
    return UnauthorizedError(REVOKED_REFRESH_TOKEN, error_code="REVOKED_TOKEN")


def refresh_tokens(
    db: Session,
    user_id: UUID,
    token_id: UUID,
    presented_token: str,
    *,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> CredentialPair:
    stored = (
        db.query(RefreshToken)
        .filter(RefreshToken.id == token_id, RefreshToken.user_id == user_id)
        .first()
    )
    if not stored:
        raise UnauthorizedError(INVALID_REFRESH_TOKEN, error_code="INVALID_TOKEN")

    if stored.is_revoked:
        raise _handle_token_reuse(db, user_id, token_id)

    if stored.is_expired_at(utcnow()):
        raise UnauthorizedError(EXPIRED_REFRESH_TOKEN, error_code="EXPIRED_TOKEN")

    if stored.token != presented_token:
        raise UnauthorizedError(INVALID_REFRESH_TOKEN, error_code="INVALID_TOKEN")

    # Conditional revoke: only one concurrent caller can flip the flag. A
    # caller that loses the race saw a token that is already spent.
    rotated = (
        db.query(RefreshToken)
        .filter(
            RefreshToken.id == token_id,
            RefreshToken.user_id == user_id,
            RefreshToken.is_revoked.is_(False),
        )
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )
    db.commit()
    if rotated != 1:
        raise _handle_token_reuse(db, user_id, token_id)

    user = validate_user_by_id(db, user_id)
    tokens = mint_credential_pair(db, user, device_info, ip_address)
    logger.info("Refresh token rotated for user %s", user_id)
    return tokens


def logout(db: Session, user_id: UUID, token_id: UUID | None = None) -> None:
    if token_id is not None:
        revoke_session(db, user_id, token_id)
        return
    _revoke_all_user_tokens(db, user_id)
    logger.info("User %s logged out of all sessions", user_id)


def logout_all(db: Session, user_id: UUID) -> None:
    revoked = _revoke_all_user_tokens(db, user_id)
    logger.info("User %s logged out everywhere (%s sessions)", user_id, revoked)


def get_active_sessions(db: Session, user_id: UUID) -> list[SessionSummary]:
    records = (
        db.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .order_by(RefreshToken.created_at.desc())
        .all()
    )
    now = utcnow()
    return [
        SessionSummary(
            id=record.id,
            device_info=record.device_info,
            ip_address=record.ip_address,
            created_at=record.created_at,
        )
        for record in records
        if not record.is_expired_at(now)
    ]


def revoke_session(db: Session, user_id: UUID, token_id: UUID) -> None:
    (
        db.query(RefreshToken)
        .filter(RefreshToken.id == token_id, RefreshToken.user_id == user_id)
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )
    db.commit()


def cleanup_expired_tokens(db: Session) -> int:
    deleted = (
        db.query(RefreshToken)
        .filter(RefreshToken.expires_at < utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Deleted %s expired refresh tokens", deleted)
    return deleted
