"""Cart API views.

Vendor-only endpoints over the Cart Store. Every mutation answers with the
full, freshly read cart so clients never need a follow-up GET.
"""

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from cart.models import Cart, CartItem
from cart.services import ISSUE_UNAVAILABLE, CartStore
from common.api.responses import envelope
from profiles.api.permissions import IsVendor
from .serializers import (
    CartItemAddSerializer,
    CartItemUpdateSerializer,
    CartSerializer,
    CartSummarySerializer,
)


def _cart_payload(cart):
    """Serialize a cart re-read with its lines and their products."""
    cart = Cart.objects.prefetch_related(
        Prefetch("items", queryset=CartItem.objects.select_related("product"))
    ).get(pk=cart.pk)
    return {"cart": CartSerializer(cart).data}


class CartBaseView(APIView):
    permission_classes = [IsAuthenticated, IsVendor]
    store_class = CartStore

    def get_store(self):
        return self.store_class()


class CartView(CartBaseView):
    """GET: current cart (inactive products pruned). DELETE: clear the cart."""

    def get(self, request):
        cart = self.get_store().load(request.user)
        return envelope("Cart retrieved successfully", _cart_payload(cart))

    def delete(self, request):
        cart = self.get_store().clear(request.user)
        return envelope("Cart cleared successfully", _cart_payload(cart))


class CartItemCreateView(CartBaseView):
    """POST /api/cart/items/ -> add a product (quantities are summed for existing lines)."""

    def post(self, request):
        ser = CartItemAddSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        cart = self.get_store().add_item(
            request.user,
            ser.validated_data["product_id"],
            ser.validated_data["quantity"],
            ser.validated_data.get("notes", ""),
        )
        return envelope(
            "Item added to cart successfully", _cart_payload(cart), status=status.HTTP_201_CREATED
        )


class CartItemDetailView(CartBaseView):
    """PATCH: replace a line's quantity (0 removes). DELETE: remove the line (idempotent)."""

    def patch(self, request, product_id: int):
        ser = CartItemUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quantity = ser.validated_data["quantity"]
        cart = self.get_store().update_item_quantity(request.user, product_id, quantity)
        message = "Cart item updated successfully" if quantity > 0 else "Item removed from cart"
        return envelope(message, _cart_payload(cart))

    def delete(self, request, product_id: int):
        cart = self.get_store().remove_item(request.user, product_id)
        return envelope("Item removed from cart successfully", _cart_payload(cart))


class CartSummaryView(CartBaseView):
    """GET /api/cart/summary/ -> lines grouped by supplier."""

    def get(self, request):
        summary = self.get_store().summary(request.user)
        message = "Cart summary retrieved successfully" if summary["total_items"] else "Cart is empty"
        return envelope(message, {"summary": CartSummarySerializer(summary).data})


class CartValidateView(CartBaseView):
    """POST /api/cart/validate/ -> advisory list of issues; never changes the cart."""

    def post(self, request):
        store = self.get_store()
        issues = store.validate(request.user)
        cart = Cart.objects.filter(vendor=request.user).first()
        total = cart.items.count() if cart else 0
        unavailable = {i["product_id"] for i in issues if i["type"] == ISSUE_UNAVAILABLE}
        return envelope(
            "Cart validation completed" if total else "Cart is empty",
            {
                "issues": issues,
                "valid_items_count": total - len(unavailable),
                "total_items_count": total,
            },
        )
