"""Authentication endpoints (register, login, refresh, logout, sessions)."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from onlineshops.core.deps import get_current_user
from onlineshops.core.rate_limit import client_ip, rate_limit
from onlineshops.core.rbac import AuthenticatedUser
from onlineshops.db.session import get_db
from onlineshops.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    SessionOut,
    TokenPairOut,
)
from onlineshops.schemas.user import UserOut
from onlineshops.services import auth as auth_service
from onlineshops.services.auth import AuthResult, CredentialPair

router = APIRouter(dependencies=[Depends(rate_limit("auth"))])


def _provenance(request: Request) -> dict[str, str | None]:
    return {
        "device_info": request.headers.get("user-agent") or None,
        "ip_address": client_ip(request),
    }


def _token_pair_out(tokens: CredentialPair) -> TokenPairOut:
    return TokenPairOut(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        **_token_pair_out(result.tokens).model_dump(),
        user=UserOut.model_validate(result.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)) -> AuthResponse:
    result = auth_service.register(db, payload, **_provenance(request))
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)) -> AuthResponse:
    result = auth_service.login(db, payload.email, payload.password, **_provenance(request))
    return _auth_response(result)


@router.get("/me", response_model=UserOut)
def me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    return UserOut.model_validate(auth_service.validate_user_by_id(db, current_user.user_id))


@router.post("/refresh", response_model=TokenPairOut)
def refresh(payload: RefreshTokenRequest, request: Request, db: Session = Depends(get_db)) -> TokenPairOut:
    claims = auth_service.decode_refresh_token(payload.refresh_token)
    tokens = auth_service.refresh_tokens(
        db,
        claims.user_id,
        claims.token_id,
        payload.refresh_token,
        **_provenance(request),
    )
    return _token_pair_out(tokens)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def logout(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    auth_service.logout(db, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def logout_all(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    auth_service.logout_all(db, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/sessions", response_model=list[SessionOut])
def list_sessions(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SessionOut]:
    return [SessionOut.model_validate(s) for s in auth_service.get_active_sessions(db, current_user.user_id)]


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
)
def revoke_session(
    session_id: UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    auth_service.revoke_session(db, current_user.user_id, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
