"""Password hashing and the JWT codec for access and refresh tokens.

Access and refresh tokens are signed with independent secrets so a leaked
access secret cannot be used to forge refresh tokens (and vice versa).
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from onlineshops.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def _secret_for(token_type: str) -> str:
    if token_type == REFRESH_TOKEN_TYPE:
        return settings.JWT_REFRESH_SECRET
    return settings.JWT_SECRET


def _create_token(data: dict[str, Any], *, expires_delta: dt.timedelta, token_type: str) -> str:
    to_encode = data.copy()
    now = dt.datetime.now(dt.timezone.utc)
    expire = now + expires_delta
    to_encode.update({"type": token_type, "iat": int(now.timestamp()), "exp": expire})
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any], expires_seconds: int | None = None) -> str:
    return _create_token(
        data,
        expires_delta=dt.timedelta(seconds=expires_seconds or settings.access_token_ttl_seconds),
        token_type=ACCESS_TOKEN_TYPE,
    )


def create_refresh_token(data: dict[str, Any], expires_seconds: int | None = None) -> str:
    return _create_token(
        data,
        expires_delta=dt.timedelta(seconds=expires_seconds or settings.refresh_token_ttl_seconds),
        token_type=REFRESH_TOKEN_TYPE,
    )


def decode_token(token: str, *, token_type: str = ACCESS_TOKEN_TYPE, verify_exp: bool = True) -> dict[str, Any]:
    """Verify ``token`` with the secret of ``token_type``.

    Raises ``ValueError("expired_token")`` or ``ValueError("invalid_token")``;
    callers map these onto HTTP errors. A token of the other type fails the
    signature check (different secret) or the ``type`` claim check.
    """
    options = {"verify_exp": verify_exp}
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
        )
    except ExpiredSignatureError as exc:
        raise ValueError("expired_token") from exc
    except JWTError as exc:
        raise ValueError("invalid_token") from exc
    if payload.get("type") != token_type:
        raise ValueError("invalid_token")
    return payload
