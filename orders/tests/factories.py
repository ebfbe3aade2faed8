import factory
from common.choices import OrderStatus
from factory.django import DjangoModelFactory

from orders.models import Order, OrderItem

ADDRESS = {
    "name": "Asha Rao",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560001",
    "phone": "9876543210",
}


class OrderFactory(DjangoModelFactory):
    class Meta:
        model = Order

    user = factory.SubFactory("cart.tests.factories.UserFactory")
    email = factory.LazyAttribute(lambda o: o.user.email)
    number = factory.Sequence(lambda n: f"ORD-{n + 900000:06d}")
    status = OrderStatus.PENDING
    subtotal = 50000
    shipping = 0
    discount = 0
    total = 50000
    shipping_address = factory.LazyFunction(lambda: dict(ADDRESS))
    payment_order_id = factory.Sequence(lambda n: f"order_{n}")
    payment_id = factory.Sequence(lambda n: f"pay_{n}")


class OrderItemFactory(DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    product_name = factory.LazyAttribute(lambda o: o.product.title if o.product else "Removed product")
    quantity = 1
    price = factory.LazyAttribute(lambda o: o.product.price if o.product else 1000)
