from conftest import auth, place_dine_in

from cafe.core.config import Config


ADMIN = auth("admin-1")


def test_admin_routes_need_admin_role(client, staff):
    assert client.get("/api/v1/admin/coupons", headers=auth("staff-1")).status_code == 403
    assert client.get("/api/v1/admin/coupons", headers=auth("cust-1")).status_code == 403
    assert client.get("/api/v1/admin/coupons").status_code == 401


def test_coupon_management(client, staff):
    created = client.post(
        "/api/v1/admin/coupons",
        json={"code": " summer25 ", "discount_type": "percentage", "discount_value": 25, "description": "Summer"},
        headers=ADMIN,
    )
    assert created.status_code == 201, created.text
    coupon = created.json()
    assert coupon["code"] == "SUMMER25"

    duplicate = client.post(
        "/api/v1/admin/coupons",
        json={"code": "Summer25", "discount_type": "fixed", "discount_value": 2},
        headers=ADMIN,
    )
    assert duplicate.status_code == 409

    too_much = client.post(
        "/api/v1/admin/coupons",
        json={"code": "HUGE", "discount_type": "percentage", "discount_value": 150},
        headers=ADMIN,
    )
    assert too_much.status_code == 422

    updated = client.put(f"/api/v1/admin/coupons/{coupon['id']}", json={"min_order": 10}, headers=ADMIN)
    assert updated.json()["min_order"] == 10

    assert [o["code"] for o in client.get("/api/v1/offers").json()] == ["SUMMER25"]

    assert client.delete(f"/api/v1/admin/coupons/{coupon['id']}", headers=ADMIN).status_code == 204
    assert client.get("/api/v1/offers").json() == []


def test_offers_hide_inactive_coupons(client, seed):
    seed.coupon("LIVE")
    seed.coupon("PAUSED", is_active=False)

    assert [o["code"] for o in client.get("/api/v1/offers").json()] == ["LIVE"]


def test_menu_management(client, staff):
    drinks = client.post("/api/v1/admin/menu/categories", json={"name": "Drinks"}, headers=ADMIN).json()
    food = client.post("/api/v1/admin/menu/categories", json={"name": "Food"}, headers=ADMIN).json()
    assert (drinks["sort_order"], food["sort_order"]) == (1, 2)

    tea = client.post(
        "/api/v1/admin/menu/items",
        json={"name": "Tea", "price": 2.2, "category_id": drinks["id"]},
        headers=ADMIN,
    ).json()
    client.post(
        "/api/v1/admin/menu/items",
        json={"name": "Hidden Brew", "price": 4, "category_id": drinks["id"], "is_available": False},
        headers=ADMIN,
    )
    client.post("/api/v1/admin/menu/items", json={"name": "Toast", "price": 3, "category_id": food["id"]}, headers=ADMIN)

    menu = client.get("/api/v1/menu").json()
    assert [section["name"] for section in menu] == ["Drinks", "Food"]
    assert [item["name"] for item in menu[0]["items"]] == ["Tea"]
    assert menu[0]["items"][0]["price"] == 2.2

    missing_category = client.post(
        "/api/v1/admin/menu/items",
        json={"name": "Ghost", "price": 1, "category_id": 999},
        headers=ADMIN,
    )
    assert missing_category.status_code == 404

    assert client.delete(f"/api/v1/admin/menu/categories/{drinks['id']}", headers=ADMIN).status_code == 204
    names = [item["name"] for item in client.get("/api/v1/admin/menu/items", headers=ADMIN).json()]
    assert names == ["Toast"]
    assert client.put(f"/api/v1/admin/menu/items/{tea['id']}", json={"price": 1}, headers=ADMIN).status_code == 404


def test_table_management(client, staff):
    created = client.post("/api/v1/admin/tables", json={"table_number": 12, "seats": 6}, headers=ADMIN)
    assert created.status_code == 201
    table = created.json()
    assert table["status"] == "available"

    assert client.post("/api/v1/admin/tables", json={"table_number": 12}, headers=ADMIN).status_code == 409

    reserved = client.put(f"/api/v1/admin/tables/{table['id']}", json={"status": "reserved"}, headers=auth("staff-1"))
    assert reserved.json()["status"] == "reserved"

    assert client.delete(f"/api/v1/admin/tables/{table['id']}", headers=auth("staff-1")).status_code == 403
    assert client.delete(f"/api/v1/admin/tables/{table['id']}", headers=ADMIN).status_code == 204
    assert client.get("/api/v1/admin/tables", headers=ADMIN).json() == []


def test_staff_roles(client, seed, staff):
    seed.profile("cust-1")

    promoted = client.put("/api/v1/admin/users/cust-1/role", json={"role": "kitchen"}, headers=ADMIN)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "kitchen"

    kitchen = client.get("/api/v1/admin/users", params={"role": "kitchen"}, headers=ADMIN).json()
    assert sorted(u["id"] for u in kitchen) == ["cust-1", "kitchen-1"]

    demote_self = client.put("/api/v1/admin/users/admin-1/role", json={"role": "staff"}, headers=ADMIN)
    assert demote_self.status_code == 400

    assert client.put("/api/v1/admin/users/nobody/role", json={"role": "staff"}, headers=ADMIN).status_code == 404


def test_contact_inbox(client, staff):
    sent = client.post(
        "/api/v1/contact/",
        json={"name": "Jo", "email": "jo@example.com", "subject": "Hi", "message": "<i>Love</i> the flat white"},
    )
    assert sent.status_code == 201
    message = sent.json()
    assert message["message"] == "Love the flat white"
    assert message["is_read"] is False

    blank = client.post("/api/v1/contact/", json={"name": "Jo", "email": "jo@example.com", "message": "<p></p>"})
    assert blank.status_code == 422

    inbox = client.get("/api/v1/admin/messages", headers=ADMIN).json()
    assert [m["id"] for m in inbox] == [message["id"]]

    toggled = client.patch(f"/api/v1/admin/messages/{message['id']}/read", headers=ADMIN).json()
    assert toggled["is_read"] is True
    toggled = client.patch(f"/api/v1/admin/messages/{message['id']}/read", headers=ADMIN).json()
    assert toggled["is_read"] is False

    assert client.delete(f"/api/v1/admin/messages/{message['id']}", headers=ADMIN).status_code == 204
    assert client.get("/api/v1/admin/messages", headers=ADMIN).json() == []


def test_sales_report_excludes_cancelled_orders(client, seed, menu, staff):
    seed.profile("cust-1")
    kept = place_dine_in(client, seed, menu, table_number=1)
    place_dine_in(client, seed, menu, table_number=2)
    dropped = place_dine_in(client, seed, menu, table_number=3)
    client.post(f"/api/v1/orders/{dropped['id']}/status", json={"action": "cancel"}, headers=ADMIN)

    report = client.get("/api/v1/admin/reports/sales", headers=ADMIN).json()

    assert report["total_orders"] == 2
    assert report["total_revenue"] == 11.0
    assert report["average_order"] == 5.5
    assert report["customers"] == 1
    assert report["currency"] == Config.CURRENCY
    assert len(report["recent_orders"]) == 3
    assert kept["id"] in {o["id"] for o in report["recent_orders"]}


def test_account_profile(client):
    headers = auth("cust-5")

    profile = client.get("/api/v1/account/profile", headers=headers).json()
    assert profile["id"] == "cust-5"
    assert profile["role"] == "customer"
    assert profile["email"] == "cust-5@example.com"

    updated = client.put(
        "/api/v1/account/profile",
        json={"full_name": "Pat Doe", "phone": "+44 7700 900123"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["full_name"] == "Pat Doe"

    bad_phone = client.put("/api/v1/account/profile", json={"phone": "call me"}, headers=headers)
    assert bad_phone.status_code == 422
