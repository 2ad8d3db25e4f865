import pytest
from fastapi.testclient import TestClient

from storefront.core.exceptions import EmailDeliveryError
from storefront.core.security import create_access_token, get_password_hash
from storefront.database.connection import get_db
from storefront.main import app
from storefront.models.tracking_log import TrackingLog
from storefront.models.user import User
from storefront.services.email_service import get_email_sender


@pytest.fixture()
def client(db, email_sender):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _user(db, username, role="user", password="password123"):
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _auth(user):
    token = create_access_token({"sub": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(db):
    return _auth(_user(db, "admin", role="admin"))


RING = {
    "name": "Classic Band",
    "category_type": "Gold",
    "category": "Rings",
    "gender": "Women",
    "metal_type": "18K Yellow Gold",
    "purity": "18K",
    "weight": 5,
    "price": 30000,
    "cover_image": "https://cdn.example.com/band.jpg",
}


# --------------------------
# error mapping
# --------------------------
def test_listing_without_pricing_is_configuration_error(client):
    response = client.get("/ornaments/")
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "CONFIGURATION_ERROR"
    assert body["message"] == "Pricing not configured"


def test_missing_ornament_is_404(client, pricing):
    response = client.get("/ornaments/9999")
    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"


def test_empty_pricing_update_is_400(client, admin_headers):
    response = client.put("/pricing/", json={}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


def test_pricing_update_requires_admin(client, db):
    assert client.put("/pricing/", json={"diamond_price_per_carat": 1}).status_code == 401
    shopper = _auth(_user(db, "shopper"))
    response = client.put("/pricing/", json={"diamond_price_per_carat": 1}, headers=shopper)
    assert response.status_code == 403


def test_negative_gold_rate_is_422(client, admin_headers):
    response = client.put("/pricing/", json={"gold_prices": {"18K": -6000}}, headers=admin_headers)
    assert response.status_code == 422


def test_pricing_read_when_missing_is_404(client):
    assert client.get("/pricing/").status_code == 404


def test_forgot_password_email_failure_is_502(client, db, email_sender):
    _user(db, "forgetful")
    email_sender.fail_with = EmailDeliveryError("smtp down")

    response = client.post("/auth/forgot-password", json={"email": "forgetful@example.com"})

    assert response.status_code == 502
    assert response.json()["error"] == "EMAIL_DELIVERY_ERROR"


# --------------------------
# catalog + pricing
# --------------------------
def test_admin_pricing_update_recalculates_and_lists(client, admin_headers):
    created = client.post("/ornaments/", json=RING, headers=admin_headers)
    assert created.status_code == 201
    ornament_id = created.json()["id"]
    assert created.json()["sku"] == "GO-W-RIN-001"

    updated = client.put("/pricing/", json={"gold_prices": {"18K": 6000}}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["recalculation"] == {"updated": 1, "skipped": []}

    listing = client.get("/ornaments/", params={"currency": "usd"})
    assert listing.status_code == 200
    body = listing.json()
    assert body["currency"] == "USD"
    assert body["total"] == 1
    ornament = body["ornaments"][0]
    assert ornament["id"] == ornament_id
    assert ornament["price"] == pytest.approx(30000.0)
    assert ornament["pricing"]["display_price"] == pytest.approx(360.0)
    assert ornament["starting_price"] == pytest.approx(360.0)


def test_detail_includes_variants(client, admin_headers, pricing):
    parent = client.post("/ornaments/", json={**RING, "design_code": "BAND"}, headers=admin_headers).json()
    client.post(
        "/ornaments/",
        json={**RING, "name": "Band 14K", "purity": "14K", "parent_id": parent["id"]},
        headers=admin_headers,
    )

    detail = client.get(f"/ornaments/{parent['id']}")
    assert detail.status_code == 200
    body = detail.json()
    assert len(body["variants"]) == 1
    assert body["starting_price"] == pytest.approx(21000.0)

    siblings = client.get(f"/ornaments/{parent['id']}/siblings")
    assert [item["name"] for item in siblings.json()] == ["Band 14K"]


def test_sku_update_rejected(client, admin_headers):
    created = client.post("/ornaments/", json=RING, headers=admin_headers).json()
    response = client.put(f"/ornaments/{created['id']}", json={"sku": "X"}, headers=admin_headers)
    assert response.status_code == 400


# --------------------------
# cart + login merge
# --------------------------
def test_login_merges_guest_cart(client, db, admin_headers):
    ornament = client.post("/ornaments/", json=RING, headers=admin_headers).json()
    _user(db, "buyer")

    guest = client.post("/cart/guest/add", json={"ornament_id": ornament["id"], "quantity": 2}).json()
    guest_id = guest["guest_id"]
    assert guest["cart"]["items"][0]["quantity"] == 2

    login = client.post(
        "/auth/login",
        data={"username": "buyer", "password": "password123", "guest_id": guest_id},
    )
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    cart = client.get("/cart/user", headers=headers).json()
    assert [(item["ornament_id"], item["quantity"]) for item in cart["items"]] == [(ornament["id"], 2)]
    assert client.get(f"/cart/guest/{guest_id}").json()["items"] == []


# --------------------------
# contact, tracking, health
# --------------------------
def test_contact_query_relays_two_emails(client, email_sender):
    response = client.post(
        "/contact/query",
        json={"email": "a@example.com", "product_id": "1", "product_name": "Band"},
    )
    assert response.status_code == 200
    assert len(email_sender.sent) == 2


def test_tracking_records_session_and_user(client, db):
    user = _user(db, "tracked")
    response = client.post(
        "/tracking/",
        json={"event": "visit", "metadata": {"platform": "api"}},
        headers={"X-Session-Id": "abc", **_auth(user)},
    )

    assert response.status_code == 201
    log = db.query(TrackingLog).filter(TrackingLog.id == response.json()["id"]).first()
    assert log.session_id == "abc"
    assert log.user_id == user.id
    assert log.platform == "api"


def test_tracking_rejects_unknown_event(client):
    assert client.post("/tracking/", json={"event": "teleport"}).status_code == 422


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["db_ok"] is True
