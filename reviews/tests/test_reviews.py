import pytest
from cart.tests.factories import UserFactory
from catalog.selectors import ProductNotFound
from catalog.tests.factories import ProductFactory
from common.choices import OrderStatus
from common.errors import AuthorizationError, ValidationError
from orders.tests.factories import OrderFactory, OrderItemFactory
from rest_framework.test import APIClient
from reviews.models import Review
from reviews.selectors import has_verified_purchase, product_review_stats
from reviews.services import submit_review

COMMENT = "Great fabric, fits well."


def purchase(user, product, status=OrderStatus.DELIVERED):
    OrderItemFactory(order=OrderFactory(user=user, status=status), product=product)


@pytest.mark.django_db
@pytest.mark.parametrize(
    "status,verified",
    [
        (OrderStatus.PENDING, False),
        (OrderStatus.PROCESSING, True),
        (OrderStatus.SHIPPED, True),
        (OrderStatus.DELIVERED, True),
        (OrderStatus.CANCELLED, False),
    ],
)
def test_verified_purchase_statuses(status, verified):
    user = UserFactory()
    product = ProductFactory()
    purchase(user, product, status)

    assert has_verified_purchase(user_id=user.id, product_id=product.id) is verified


@pytest.mark.django_db
def test_second_submission_updates_existing_review():
    user = UserFactory()
    product = ProductFactory()
    purchase(user, product)

    first, created = submit_review(user=user, product_id=product.id, rating=4, comment=COMMENT)
    assert created is True
    second, created = submit_review(user=user, product_id=product.id, rating=2, comment="Shrank after one wash.")

    assert created is False
    assert second.id == first.id
    assert Review.objects.filter(user=user, product=product).count() == 1
    assert Review.objects.get(id=first.id).rating == 2


@pytest.mark.django_db
def test_review_requires_purchase_and_login():
    product = ProductFactory()

    with pytest.raises(AuthorizationError) as exc:
        submit_review(user=UserFactory(), product_id=product.id, rating=5, comment=COMMENT)
    assert exc.value.message == "You must purchase this product before reviewing it"

    with pytest.raises(AuthorizationError) as exc:
        submit_review(user=None, product_id=product.id, rating=5, comment=COMMENT)
    assert exc.value.message == "You must be logged in to submit a review"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "rating,comment,message",
    [
        (0, COMMENT, "Rating must be at least 1"),
        (6, COMMENT, "Rating must be at most 5"),
        (True, COMMENT, "Rating must be an integer"),
        (4, "   too short  ", "Review must be at least 10 characters"),
        (4, "<b></b>tiny", "Review must be at least 10 characters"),
        (4, "x" * 501, "Review must be less than 500 characters"),
    ],
)
def test_rating_and_comment_rules(rating, comment, message):
    user = UserFactory()
    product = ProductFactory()
    purchase(user, product)

    with pytest.raises(ValidationError) as exc:
        submit_review(user=user, product_id=product.id, rating=rating, comment=comment)
    assert exc.value.message == message


@pytest.mark.django_db
def test_unknown_product():
    with pytest.raises(ProductNotFound):
        submit_review(user=UserFactory(), product_id=424242, rating=5, comment=COMMENT)


@pytest.mark.django_db
def test_review_stats():
    product = ProductFactory()
    for rating in (5, 5, 4, 1):
        user = UserFactory()
        purchase(user, product)
        submit_review(user=user, product_id=product.id, rating=rating, comment=COMMENT)

    stats = product_review_stats(product_id=product.id)

    assert stats["total_reviews"] == 4
    assert stats["average_rating"] == 3.75
    assert stats["distribution"] == {5: 2, 4: 1, 3: 0, 2: 0, 1: 1}
    assert product_review_stats(product_id=ProductFactory().id)["average_rating"] == 0


@pytest.mark.django_db
def test_reviews_api_flow():
    user = UserFactory()
    product = ProductFactory()
    purchase(user, product, OrderStatus.PROCESSING)
    client = APIClient()
    client.force_authenticate(user=user)
    url = f"/api/v1/products/{product.id}/reviews/"

    created = client.post(url, {"rating": 5, "comment": COMMENT}, format="json")
    assert created.status_code == 201
    assert created.json()["message"] == "Review submitted successfully"

    updated = client.post(url, {"rating": 3, "comment": COMMENT}, format="json")
    assert updated.status_code == 200
    assert updated.json()["message"] == "Review updated successfully"

    listing = APIClient().get(url)
    assert listing.status_code == 200
    assert listing.json()["data"]["stats"]["total_reviews"] == 1
    assert listing.json()["data"]["reviews"][0]["rating"] == 3


@pytest.mark.django_db
def test_reviews_api_rejects_anonymous_and_unverified():
    product = ProductFactory()
    url = f"/api/v1/products/{product.id}/reviews/"

    anon = APIClient().post(url, {"rating": 5, "comment": COMMENT}, format="json")
    assert anon.status_code == 401

    client = APIClient()
    client.force_authenticate(user=UserFactory())
    unverified = client.post(url, {"rating": 5, "comment": COMMENT}, format="json")
    assert unverified.status_code == 403
