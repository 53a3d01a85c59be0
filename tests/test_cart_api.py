from datetime import datetime, timedelta
from decimal import Decimal

from conftest import auth, fill_cart, new_cart

from cafe.core.config import Config
from cafe.enums import DiscountType


def test_new_cart_is_empty(client):
    cart_id = new_cart(client)

    response = client.get(f"/api/v1/cart/{cart_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["items"] == []
    assert body["subtotal"] == 0
    assert body["total"] == 0
    assert body["currency"] == Config.CURRENCY


def test_unknown_cart(client):
    response = client.get("/api/v1/cart/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Cart not found."


def test_add_items_and_totals(client, menu):
    cart_id = new_cart(client)

    body = fill_cart(client, cart_id, menu["latte"], menu["latte"], menu["muffin"])

    assert [line["name"] for line in body["items"]] == ["Latte", "Muffin"]
    assert body["items"][0]["quantity"] == 2
    assert body["items"][0]["line_total"] == 7.0
    assert body["item_count"] == 3
    assert body["subtotal"] == 9.0
    assert body["total"] == 9.0


def test_unavailable_and_unknown_items_rejected(client, menu):
    cart_id = new_cart(client)

    for item_id in (menu["retired"].id, 9999):
        response = client.post(f"/api/v1/cart/{cart_id}/items", json={"menu_item_id": item_id})
        assert response.status_code == 400
        assert response.json()["detail"] == "This menu item is not available."


def test_price_is_frozen_when_first_added(client, menu, staff):
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"])

    response = client.put(
        f"/api/v1/admin/menu/items/{menu['latte'].id}",
        json={"price": 5.00},
        headers=auth("admin-1"),
    )
    assert response.status_code == 200

    body = fill_cart(client, cart_id, menu["latte"])
    assert body["items"][0]["unit_price"] == 3.5
    assert body["subtotal"] == 7.0


def test_update_quantity_and_remove(client, menu):
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"], menu["muffin"])

    response = client.put(f"/api/v1/cart/{cart_id}/items/{menu['latte'].id}", json={"quantity": 3})
    assert response.json()["subtotal"] == 12.5

    response = client.put(f"/api/v1/cart/{cart_id}/items/{menu['latte'].id}", json={"quantity": 0})
    assert [line["name"] for line in response.json()["items"]] == ["Muffin"]

    response = client.delete(f"/api/v1/cart/{cart_id}/items/{menu['muffin'].id}")
    assert response.json()["items"] == []


def test_apply_percentage_coupon_case_insensitive(client, seed, menu):
    seed.coupon("WELCOME10", DiscountType.PERCENTAGE, "10")
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"], menu["latte"], menu["muffin"])

    response = client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "welcome10"})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["coupon_code"] == "WELCOME10"
    assert body["discount_type"] == "percentage"
    assert body["discount"] == 0.9
    assert body["total"] == 8.1


def test_coupon_discount_is_not_rescaled(client, seed, menu):
    seed.coupon("HALF", DiscountType.PERCENTAGE, "50")
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"], menu["muffin"])
    client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "HALF"})

    body = fill_cart(client, cart_id, menu["cake"])

    assert body["discount"] == 2.75
    assert body["subtotal"] == 9.75
    assert body["total"] == 7.0


def test_minimum_order_not_met(client, seed, menu):
    seed.coupon("BIGSPEND", DiscountType.FIXED, "3", min_order="20")
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"])

    response = client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "BIGSPEND"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Minimum order of 20.00 required"
    assert client.get(f"/api/v1/cart/{cart_id}").json()["coupon_code"] is None


def test_invalid_inactive_and_expired_coupons(client, seed, menu):
    seed.coupon("OFF", is_active=False)
    seed.coupon("OLD", expires_at=datetime.utcnow() - timedelta(days=1))
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"])

    for code in ("NOPE", "OFF", "OLD"):
        response = client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": code})
        assert response.status_code == 400
        assert response.json()["detail"] == "This coupon code is not valid or has expired."


def test_limited_coupon_needs_sign_in(client, seed, menu):
    seed.coupon("ONCE", usage_limit_per_user=1)
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"])

    guest = client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "ONCE"})
    assert guest.status_code == 401

    signed_in = client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "ONCE"}, headers=auth("cust-1"))
    assert signed_in.status_code == 200


def test_remove_coupon_and_clear_cart(client, seed, menu):
    seed.coupon("FIXED1", DiscountType.FIXED, "1")
    cart_id = new_cart(client)
    fill_cart(client, cart_id, menu["latte"])
    client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "FIXED1"})

    body = client.delete(f"/api/v1/cart/{cart_id}/coupon").json()
    assert body["coupon_code"] is None
    assert body["discount"] == 0

    client.post(f"/api/v1/cart/{cart_id}/coupon", json={"code": "FIXED1"})
    body = client.delete(f"/api/v1/cart/{cart_id}").json()
    assert body["items"] == []
    assert body["coupon_code"] is None
    assert Decimal(str(body["total"])) == Decimal("0")
