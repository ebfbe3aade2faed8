import pytest
from cart.models import Cart, CartItem
from cart.tests.factories import CartItemFactory, GuestCartFactory, UserFactory
from catalog.tests.factories import ProductFactory
from rest_framework.test import APIClient


@pytest.fixture
def user_client():
    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)
    return client, user


@pytest.mark.django_db
def test_cart_detail_initial_empty(user_client):
    client, _ = user_client

    resp = client.get("/api/v1/cart/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["items"] == []
    assert body["data"]["totals"] == {"subtotal": 0, "shipping": 5000, "discount": 0, "total": 5000}
    assert body["data"]["display"]["shipping"] == "₹50.00"


@pytest.mark.django_db
def test_add_item_endpoint_returns_priced_cart(user_client):
    client, user = user_client
    product = ProductFactory(price=25000, stock=5)

    resp = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 2}, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Item added to cart"
    assert body["data"]["items"][0]["line_total"] == 50000
    assert body["data"]["totals"]["total"] == 50000
    assert body["data"]["item_count"] == 2
    assert Cart.objects.filter(user=user).exists()


@pytest.mark.django_db
def test_add_item_over_stock_returns_conflict_with_limit(user_client):
    client, _ = user_client
    product = ProductFactory(stock=10)
    client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 8}, format="json")

    resp = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 5}, format="json")

    assert resp.status_code == 409
    assert resp.json() == {
        "success": False,
        "message": "Only 10 items available. You already have 8 in your cart.",
    }


@pytest.mark.django_db
def test_add_item_unknown_product_is_404(user_client):
    client, _ = user_client

    resp = client.post("/api/v1/cart/items/", {"product_id": 424242, "quantity": 1}, format="json")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found"


@pytest.mark.django_db
@pytest.mark.parametrize("quantity", ["abc", 2.5, 0, 1001])
def test_add_item_bad_quantity_is_400(user_client, quantity):
    client, _ = user_client
    product = ProductFactory(stock=5000)

    resp = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": quantity}, format="json")

    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.django_db
def test_update_and_delete_item_endpoints(user_client):
    client, _ = user_client
    product = ProductFactory(stock=10)
    client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 2}, format="json")
    item = CartItem.objects.get(product=product)

    r_upd = client.patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 3}, format="json")
    assert r_upd.status_code == 200
    assert r_upd.json()["data"]["items"][0]["quantity"] == 3

    r_over = client.patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 11}, format="json")
    assert r_over.status_code == 409
    assert r_over.json()["message"] == "Only 10 items available"

    r_del = client.delete(f"/api/v1/cart/items/{item.id}/")
    assert r_del.status_code == 200
    assert r_del.json()["data"]["items"] == []


@pytest.mark.django_db
def test_cannot_update_someone_elses_item(user_client):
    client, _ = user_client
    foreign = CartItemFactory(quantity=1)

    resp = client.patch(f"/api/v1/cart/items/{foreign.id}/", {"quantity": 2}, format="json")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Cart item not found"
    foreign.refresh_from_db()
    assert foreign.quantity == 1


@pytest.mark.django_db
def test_clear_endpoint(user_client):
    client, _ = user_client
    client.post("/api/v1/cart/items/", {"product_id": ProductFactory().id, "quantity": 1}, format="json")

    resp = client.post("/api/v1/cart/clear/")

    assert resp.status_code == 200
    assert not CartItem.objects.exists()


@pytest.mark.django_db
def test_authenticated_user_ignores_session_header(user_client):
    client, user = user_client
    guest = GuestCartFactory(session_id="sess-x")
    CartItemFactory(cart=guest, quantity=4)

    resp = client.get("/api/v1/cart/", HTTP_X_SESSION_ID="sess-x")

    assert resp.status_code == 200
    assert resp.json()["data"]["items"] == []


@pytest.mark.django_db
def test_update_endpoint_accepts_large_in_stock_quantity(user_client):
    client, _ = user_client
    product = ProductFactory(stock=2000)
    client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 1}, format="json")
    item = CartItem.objects.get(product=product)

    resp = client.patch(f"/api/v1/cart/items/{item.id}/", {"quantity": 1500}, format="json")

    assert resp.status_code == 200
    assert resp.json()["data"]["item_count"] == 1500
