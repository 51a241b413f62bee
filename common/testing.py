"""Factories shared by the test suites of all apps."""

from decimal import Decimal
from itertools import count

from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from catalog.models import Product
from profiles.models import Profile

User = get_user_model()

_seq = count(1)

PASSWORD = "Bazaar#Pass2024"

ADDRESS = {
    "street": "12 Station Road",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


def make_vendor(username=None, **profile):
    n = next(_seq)
    user = User.objects.create_user(
        username=username or f"vendor{n}", email=f"vendor{n}@example.com", password=PASSWORD
    )
    fields = {"vendor_type": Profile.VendorType.STREET_FOOD, "phone": "9876543210", "city": "Pune"}
    fields.update(profile)
    Profile.objects.create(user=user, role=Profile.Role.VENDOR, **fields)
    return user


def make_supplier(username=None, verified=True, **profile):
    n = next(_seq)
    user = User.objects.create_user(
        username=username or f"supplier{n}", email=f"supplier{n}@example.com", password=PASSWORD
    )
    fields = {
        "business_name": f"Supplier {n} Traders",
        "fssai_number": f"{n:014d}",
        "phone": "9123456780",
        "city": "Pune",
        "is_verified": verified,
    }
    fields.update(profile)
    Profile.objects.create(user=user, role=Profile.Role.SUPPLIER, **fields)
    return user


def make_product(supplier, **fields):
    values = {
        "name": f"Onion {next(_seq)}",
        "description": "Fresh red onions",
        "category": Product.Category.VEGETABLES,
        "price_amount": Decimal("40.00"),
        "price_unit": Product.Unit.KG,
        "minimum_order_quantity": 1,
        "available_quantity": 100,
    }
    values.update(fields)
    return Product.objects.create(supplier=supplier, **values)


def auth(client, user):
    """Authenticate an APIClient with the user's token."""
    token, _ = Token.objects.get_or_create(user=user)
    client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
    return token


def error_fields(response):
    return {e["field"] for e in response.data.get("errors", [])}


def place_order(vendor, supplier, deliver=True, quantity=1):
    """Check out one fresh product of ``supplier``; optionally walk it to delivered."""
    from cart.services import CartStore
    from orders.models import OrderStatus
    from orders.services import OrderEngine

    engine = OrderEngine()
    product = make_product(supplier)
    CartStore().add_item(vendor, product.id, quantity)
    checkout, _ = engine.create_orders(vendor, delivery_address=ADDRESS)
    order = checkout.orders.get()
    if deliver:
        for target in (
            OrderStatus.ACCEPTED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ):
            engine.transition(supplier, order.id, target)
    return order
