from __future__ import annotations

from decimal import Decimal

import pytest

from onlineshops.models.enums import UserRole
from onlineshops.services import auth


def _headers(db, user) -> dict[str, str]:
    tokens = auth.mint_credential_pair(db, user)
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest.fixture
def owner_headers(db, make_user):
    return _headers(db, make_user("owner@example.com", role=UserRole.shop_owner))


@pytest.fixture
def shop_id(client, owner_headers):
    return client.post("/shops", json={"name": "Mug Shop"}, headers=owner_headers).json()["id"]


def _product(shop_id: str, **overrides):
    body = {"shopId": shop_id, "name": "Blue Mug", "price": "19.99", "sku": "MUG-BLUE"}
    body.update(overrides)
    return body


def test_owner_creates_product(client, owner_headers, shop_id) -> None:
    created = client.post("/products", json=_product(shop_id, comparePrice="24.99"), headers=owner_headers)
    assert created.status_code == 201
    product = created.json()
    assert product["slug"] == "blue-mug"
    assert product["status"] == "draft"
    assert Decimal(str(product["price"])) == Decimal("19.99")
    assert product["isOnSale"] is True
    assert product["isInStock"] is False

    assert client.get(f"/products/{product['id']}").json()["sku"] == "MUG-BLUE"


def test_sku_and_slug_collisions_conflict(client, owner_headers, shop_id) -> None:
    assert client.post("/products", json=_product(shop_id), headers=owner_headers).status_code == 201

    same_sku = client.post("/products", json=_product(shop_id, name="Red Mug"), headers=owner_headers)
    assert same_sku.status_code == 409
    assert same_sku.json()["message"] == "Product SKU already exists"

    same_slug = client.post("/products", json=_product(shop_id, sku="MUG-BLUE-2"), headers=owner_headers)
    assert same_slug.status_code == 409
    assert same_slug.json()["message"] == "Product slug already exists"

    red = client.post("/products", json=_product(shop_id, name="Red Mug", sku="MUG-RED"), headers=owner_headers)
    clash = client.patch(f"/products/{red.json()['id']}", json={"sku": "MUG-BLUE"}, headers=owner_headers)
    assert clash.status_code == 409


def test_product_writes_require_permission_and_shop_ownership(client, db, make_user, shop_id) -> None:
    shopper = make_user("shopper@example.com")
    rival = make_user("rival@example.com", role=UserRole.shop_owner)
    supplier = make_user("supplier@example.com", role=UserRole.supplier)

    denied = client.post("/products", json=_product(shop_id), headers=_headers(db, shopper))
    assert denied.status_code == 403
    assert denied.json()["details"]["missing_permissions"] == ["product:create"]

    for user in (rival, supplier):
        response = client.post("/products", json=_product(shop_id), headers=_headers(db, user))
        assert response.status_code == 403
        assert response.json()["message"] == "You can only manage your own shops"

    admin = make_user("admin@example.com", role=UserRole.admin)
    assert client.post("/products", json=_product(shop_id), headers=_headers(db, admin)).status_code == 201


def test_unknown_shop_is_not_found(client, owner_headers) -> None:
    response = client.post(
        "/products",
        json=_product("00000000-0000-0000-0000-000000000000"),
        headers=owner_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Shop not found"


def test_listing_filters(client, owner_headers, shop_id) -> None:
    other_shop = client.post("/shops", json={"name": "Tea Shop"}, headers=owner_headers).json()["id"]
    client.post("/products", json=_product(shop_id), headers=owner_headers)
    client.post(
        "/products",
        json=_product(shop_id, name="Green Mug", sku="MUG-GREEN", status="active"),
        headers=owner_headers,
    )
    client.post("/products", json=_product(other_shop, name="Green Tea", sku="TEA-GREEN"), headers=owner_headers)

    def names(**params):
        return sorted(p["name"] for p in client.get("/products", params=params).json())

    assert names() == ["Blue Mug", "Green Mug", "Green Tea"]
    assert names(shopId=shop_id) == ["Blue Mug", "Green Mug"]
    assert names(status="active") == ["Green Mug"]
    assert names(search="green") == ["Green Mug", "Green Tea"]
    assert client.get("/products", params={"status": "bogus"}).status_code == 422


def test_update_product_fields(client, owner_headers, shop_id) -> None:
    product_id = client.post(
        "/products", json=_product(shop_id, comparePrice="24.99"), headers=owner_headers
    ).json()["id"]

    updated = client.patch(
        f"/products/{product_id}",
        json={"price": "17.50", "comparePrice": None, "images": ["https://cdn.example.com/mug.png"]},
        headers=owner_headers,
    )
    assert updated.status_code == 200
    data = updated.json()
    assert Decimal(str(data["price"])) == Decimal("17.50")
    assert data["comparePrice"] is None
    assert data["isOnSale"] is False
    assert data["images"] == ["https://cdn.example.com/mug.png"]


def test_stock_adjustments(client, db, make_user, owner_headers, shop_id) -> None:
    product_id = client.post("/products", json=_product(shop_id, status="active"), headers=owner_headers).json()["id"]
    url = f"/products/{product_id}/stock"

    stocked = client.post(url, json={"quantity": 5}, headers=owner_headers).json()
    assert (stocked["stockQty"], stocked["isInStock"], stocked["status"]) == (5, True, "active")

    drained = client.post(url, json={"quantity": -10}, headers=owner_headers).json()
    assert (drained["stockQty"], drained["status"]) == (0, "out_of_stock")

    restocked = client.post(url, json={"quantity": 3}, headers=owner_headers).json()
    assert (restocked["stockQty"], restocked["status"]) == (3, "active")

    shopper = make_user("shopper@example.com")
    denied = client.post(url, json={"quantity": 1}, headers=_headers(db, shopper))
    assert denied.status_code == 403
    assert set(denied.json()["details"]["missing_permissions"]) == {"product:update", "inventory:update"}


def test_delete_product(client, db, make_user, owner_headers, shop_id) -> None:
    first = client.post("/products", json=_product(shop_id), headers=owner_headers).json()["id"]
    second = client.post("/products", json=_product(shop_id, name="Red Mug", sku="MUG-RED"), headers=owner_headers).json()["id"]

    rival = make_user("rival@example.com", role=UserRole.shop_owner)
    assert client.delete(f"/products/{first}", headers=_headers(db, rival)).status_code == 403

    assert client.delete(f"/products/{first}", headers=owner_headers).status_code == 204
    assert client.get(f"/products/{first}").status_code == 404

    admin = make_user("admin@example.com", role=UserRole.admin)
    assert client.delete(f"/products/{second}", headers=_headers(db, admin)).status_code == 204
