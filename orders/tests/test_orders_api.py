import pytest
from cart.identity import CartOwner
from cart.services import add_item
from cart.tests.factories import StaffUserFactory, UserFactory
from catalog.tests.factories import ProductFactory
from common.choices import OrderStatus
from orders.models import Order
from orders.payments import compute_signature
from orders.tests.factories import ADDRESS, OrderFactory, OrderItemFactory
from rest_framework.test import APIClient

SECRET = "api-secret"


@pytest.fixture(autouse=True)
def payment_secret(settings):
    settings.PAYMENT_KEY_SECRET = SECRET


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def checkout_payload(payment_id="pay_api", **overrides):
    payload = {
        "payment_order_id": "order_api",
        "payment_id": payment_id,
        "signature": compute_signature("order_api", payment_id, SECRET),
        "shipping_address": dict(ADDRESS),
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
def test_checkout_endpoint_creates_order():
    user = UserFactory()
    add_item(owner=CartOwner.for_user(user.id), product_id=ProductFactory(price=25000, stock=3).id, quantity=2)

    resp = client_for(user).post("/api/v1/orders/checkout/", checkout_payload(), format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Order created successfully"
    order = Order.objects.get(id=body["data"]["order_id"])
    assert order.total == 50000 == body["data"]["total"]


@pytest.mark.django_db
def test_checkout_with_bad_signature():
    user = UserFactory()
    add_item(owner=CartOwner.for_user(user.id), product_id=ProductFactory().id, quantity=1)

    resp = client_for(user).post("/api/v1/orders/checkout/", checkout_payload(signature="bad"), format="json")

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Payment verification failed. Please contact support."}


@pytest.mark.django_db
def test_checkout_with_empty_cart_is_conflict():
    resp = client_for(UserFactory()).post("/api/v1/orders/checkout/", checkout_payload(), format="json")

    assert resp.status_code == 409
    assert resp.json()["message"] == "Cart is empty"


@pytest.mark.django_db
def test_checkout_requires_login():
    resp = APIClient().post("/api/v1/orders/checkout/", checkout_payload(), format="json")

    assert resp.status_code == 401
    assert resp.json()["message"] == "Unauthorized"


@pytest.mark.django_db
def test_checkout_reports_address_problems():
    user = UserFactory()
    payload = checkout_payload(shipping_address=dict(ADDRESS, phone="123"))

    resp = client_for(user).post("/api/v1/orders/checkout/", payload, format="json")

    assert resp.status_code == 400
    assert resp.json()["message"] == "Phone number must be exactly 10 digits"


@pytest.mark.django_db
def test_checkout_missing_fields_use_result_envelope():
    resp = client_for(UserFactory()).post("/api/v1/orders/checkout/", {"payment_id": "p"}, format="json")

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["message"].startswith("payment_order_id:")


@pytest.mark.django_db
def test_order_list_and_detail_are_owner_scoped():
    user = UserFactory()
    mine = OrderFactory(user=user)
    OrderItemFactory(order=mine, quantity=2, price=12345)
    theirs = OrderFactory()
    client = client_for(user)

    listing = client.get("/api/v1/orders/")
    assert listing.status_code == 200
    assert [o["id"] for o in listing.json()["results"]] == [mine.id]

    detail = client.get(f"/api/v1/orders/{mine.id}/")
    assert detail.status_code == 200
    assert detail.json()["items"][0]["line_total"] == 24690
    assert detail.json()["display"]["total"] == "₹500.00"
    assert detail.json()["estimated_delivery"] is not None

    assert client.get(f"/api/v1/orders/{theirs.id}/").status_code == 404


@pytest.mark.django_db
def test_admin_list_filters_by_status_and_number():
    OrderFactory(number="ORD-000001")
    shipped = OrderFactory(number="ORD-000002", status=OrderStatus.SHIPPED)
    client = client_for(StaffUserFactory())

    by_status = client.get("/api/v1/admin/orders/?status=SHIPPED")
    assert [o["id"] for o in by_status.json()["results"]] == [shipped.id]

    by_number = client.get("/api/v1/admin/orders/?number=ORD-000002")
    assert [o["id"] for o in by_number.json()["results"]] == [shipped.id]


@pytest.mark.django_db
def test_admin_list_is_staff_only():
    assert client_for(UserFactory()).get("/api/v1/admin/orders/").status_code == 403


@pytest.mark.django_db
def test_admin_status_endpoint():
    order = OrderFactory()
    admin = client_for(StaffUserFactory())

    ok = admin.post(f"/api/v1/admin/orders/{order.id}/status/", {"status": "PROCESSING"}, format="json")
    assert ok.status_code == 200
    assert ok.json()["message"] == "Order status updated successfully"
    assert ok.json()["data"] == {"order_id": order.id, "status": "PROCESSING"}

    bad = admin.post(f"/api/v1/admin/orders/{order.id}/status/", {"status": "PENDING"}, format="json")
    assert bad.status_code == 409
    assert bad.json()["message"] == "Cannot transition from PROCESSING to PENDING"

    missing = admin.post("/api/v1/admin/orders/999999/status/", {"status": "SHIPPED"}, format="json")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Order not found"


@pytest.mark.django_db
def test_admin_status_endpoint_refuses_customers():
    order = OrderFactory()

    resp = client_for(order.user).post(f"/api/v1/admin/orders/{order.id}/status/", {"status": "PROCESSING"}, format="json")

    assert resp.status_code == 403
    assert resp.json()["message"] == "Admin access required"
