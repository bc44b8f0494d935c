from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from onlineshops.core.config import DEFAULT_JWT_REFRESH_SECRET, Settings
from onlineshops.core.deps import authorize, get_current_user, require_permissions, supplier_only
from onlineshops.core.exceptions import OnlineShopsException
from onlineshops.core.security import create_access_token
from onlineshops.models.enums import Permission, UserRole


def _guarded_app() -> FastAPI:
    app = FastAPI()

    @app.exception_handler(OnlineShopsException)
    async def _handle(_request, exc: OnlineShopsException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.get("/public")
    def public() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/whoami")
    def whoami(user=Depends(get_current_user)) -> dict[str, str]:
        return {"role": user.role.value, "email": user.email}

    @app.post("/products", dependencies=[Depends(authorize(roles=[UserRole.shop_owner], permissions=[Permission.product_create]))])
    def create_product() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/inventory", dependencies=[Depends(require_permissions(Permission.inventory_read, Permission.inventory_update))])
    def inventory() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/fulfilment", dependencies=[Depends(supplier_only)])
    def fulfilment() -> dict[str, bool]:
        return {"ok": True}

    return app


def _token(role: UserRole, **kwargs) -> dict[str, str]:
    token = create_access_token({"sub": str(uuid4()), "email": f"{role.value}@example.com", "role": role.value}, **kwargs)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def guarded_client() -> TestClient:
    return TestClient(_guarded_app())


def test_public_route_needs_no_token(guarded_client) -> None:
    assert guarded_client.get("/public").status_code == 200


def test_claims_become_authenticated_user(guarded_client) -> None:
    response = guarded_client.get("/whoami", headers=_token(UserRole.supplier))
    assert response.json() == {"role": "supplier", "email": "supplier@example.com"}


def test_expired_access_token(guarded_client) -> None:
    response = guarded_client.get("/whoami", headers=_token(UserRole.shopper, expires_seconds=-5))
    assert response.status_code == 401
    assert response.json()["error_code"] == "EXPIRED_TOKEN"


def test_non_bearer_scheme_is_unauthenticated(guarded_client) -> None:
    response = guarded_client.get("/whoami", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "NOT_AUTHENTICATED"


def test_roles_and_permissions_must_both_pass(guarded_client) -> None:
    assert guarded_client.post("/products", headers=_token(UserRole.shop_owner)).status_code == 200
    # Supplier holds product:create but is not a listed role.
    assert guarded_client.post("/products", headers=_token(UserRole.supplier)).status_code == 403
    assert guarded_client.post("/products", headers=_token(UserRole.shopper)).status_code == 403


def test_permission_conjunction(guarded_client) -> None:
    assert guarded_client.get("/inventory", headers=_token(UserRole.supplier)).status_code == 200
    assert guarded_client.get("/inventory", headers=_token(UserRole.admin)).status_code == 200
    assert guarded_client.get("/inventory", headers=_token(UserRole.shopper)).status_code == 403


def test_role_shorthand_allows_admin(guarded_client) -> None:
    assert guarded_client.get("/fulfilment", headers=_token(UserRole.admin)).status_code == 200
    assert guarded_client.get("/fulfilment", headers=_token(UserRole.shop_owner)).status_code == 403


def test_production_refuses_default_refresh_secret() -> None:
    settings = Settings(ENV="production", JWT_SECRET="real-access-secret", JWT_REFRESH_SECRET=DEFAULT_JWT_REFRESH_SECRET)
    with pytest.raises(RuntimeError, match="JWT_REFRESH_SECRET"):
        settings.validate_runtime_security()


def test_production_refuses_shared_secret() -> None:
    settings = Settings(ENV="production", JWT_SECRET="same-secret", JWT_REFRESH_SECRET="same-secret")
    with pytest.raises(RuntimeError):
        settings.validate_runtime_security()


def test_development_only_warns(caplog) -> None:
    settings = Settings(ENV="development", JWT_SECRET="change-me", JWT_REFRESH_SECRET=DEFAULT_JWT_REFRESH_SECRET)
    settings.validate_runtime_security()
    assert "insecure development signing secrets" in caplog.text


def test_token_ttls() -> None:
    settings = Settings(ACCESS_TOKEN_EXPIRE_MINUTES=15, REFRESH_TOKEN_EXPIRE_DAYS=7)
    assert settings.access_token_ttl_seconds == 900
    assert settings.refresh_token_ttl_seconds == 604800
