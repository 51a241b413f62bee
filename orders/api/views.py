"""Orders API views.

Checkout and order listing share one endpoint. Every lookup goes through
the order engine, which scopes orders to the caller: vendors see orders
they placed and suppliers see orders addressed to them, so an order of
another party answers 404. Status changes return the updated order.
"""

from django.db.models import Prefetch
from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from common.api.pagination import DefaultPagination
from common.api.responses import envelope, paginated_envelope
from orders.models import Order, OrderItem, OrderStatus
from orders.services import OrderEngine
from profiles.api.permissions import IsSupplier, IsVendor
from .permissions import IsMarketplaceUser
from .serializers import (
    CheckoutSerializer,
    NotesSerializer,
    OrderSerializer,
    RejectSerializer,
    StatusUpdateSerializer,
)

IDEMPOTENCY_HEADER = "Idempotency-Key"
IDEMPOTENCY_KEY_MAX_LENGTH = 64


def _with_details(qs):
    return qs.select_related("checkout").prefetch_related(
        Prefetch("items", queryset=OrderItem.objects.order_by("id")),
        "status_history",
    )


def _order_payload(order):
    order = _with_details(Order.objects.filter(pk=order.pk)).get()
    return {"order": OrderSerializer(order).data}


def _idempotency_key(request):
    key = (request.headers.get(IDEMPOTENCY_HEADER) or "").strip()
    if len(key) > IDEMPOTENCY_KEY_MAX_LENGTH:
        raise ValidationError(
            {"idempotency_key": f"Must be at most {IDEMPOTENCY_KEY_MAX_LENGTH} characters."}
        )
    return key or None


class OrderEngineMixin:
    engine_class = OrderEngine

    def get_engine(self):
        return self.engine_class()


class OrderListCreateAPIView(OrderEngineMixin, generics.ListCreateAPIView):
    """GET: orders of the caller (filter by ``status``).
    POST: place the vendor's cart (vendor-only, honours ``Idempotency-Key``).
    """

    pagination_class = DefaultPagination
    serializer_class = OrderSerializer

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsVendor()]
        return [IsAuthenticated(), IsMarketplaceUser()]

    def get_queryset(self):
        qs = _with_details(self.get_engine().orders_for(self.request.user))
        status_value = self.request.query_params.get("status")
        if status_value:
            if status_value not in OrderStatus.values:
                raise ValidationError({"status": "Invalid status."})
            qs = qs.filter(status=status_value)
        return qs

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = OrderSerializer(page, many=True).data
        return paginated_envelope(self.paginator, "Orders retrieved successfully", "orders", data)

    def create(self, request, *args, **kwargs):
        key = _idempotency_key(request)
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        checkout, created = self.get_engine().create_orders(
            request.user,
            delivery_address=serializer.validated_data["delivery_address"],
            payment_method=serializer.validated_data["payment_method"],
            vendor_notes=serializer.validated_data.get("vendor_notes", ""),
            idempotency_key=key,
        )
        orders = _with_details(checkout.orders.order_by("id"))
        return envelope(
            "Order placed successfully" if created else "Order already placed",
            {
                "checkout": str(checkout.reference),
                "orders": OrderSerializer(orders, many=True).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class OrderDetailAPIView(OrderEngineMixin, APIView):
    """GET /api/orders/{id}/ -> one order visible to the caller."""

    permission_classes = [IsAuthenticated, IsMarketplaceUser]

    def get(self, request, pk: int):
        order = self.get_engine().get_order(request.user, pk)
        return envelope("Order retrieved successfully", _order_payload(order))


class OrderStatusUpdateAPIView(OrderEngineMixin, APIView):
    """PATCH /api/orders/{id}/status/ -> generic transition for either party."""

    permission_classes = [IsAuthenticated, IsMarketplaceUser]

    def patch(self, request, pk: int):
        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = self.get_engine().transition(
            request.user,
            pk,
            ser.validated_data["status"],
            notes=ser.validated_data.get("notes", ""),
            reason=ser.validated_data.get("reason", ""),
        )
        return envelope("Order status updated successfully", _order_payload(order))


class OrderAcceptAPIView(OrderEngineMixin, APIView):
    permission_classes = [IsAuthenticated, IsSupplier]

    def post(self, request, pk: int):
        ser = NotesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = self.get_engine().accept(request.user, pk, ser.validated_data.get("notes", ""))
        return envelope("Order accepted successfully", _order_payload(order))


class OrderRejectAPIView(OrderEngineMixin, APIView):
    permission_classes = [IsAuthenticated, IsSupplier]

    def post(self, request, pk: int):
        ser = RejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = self.get_engine().reject(request.user, pk, ser.validated_data.get("reason", ""))
        return envelope("Order rejected", _order_payload(order))


class OrderCancelAPIView(OrderEngineMixin, APIView):
    """PATCH /api/orders/{id}/cancel/ -> vendor cancels a pending order."""

    permission_classes = [IsAuthenticated, IsVendor]

    def patch(self, request, pk: int):
        ser = NotesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = self.get_engine().cancel(request.user, pk, ser.validated_data.get("notes", ""))
        return envelope("Order cancelled successfully", _order_payload(order))


class OrderAnalyticsAPIView(OrderEngineMixin, APIView):
    """GET /api/orders/analytics/ -> dashboard counters for the caller's role."""

    permission_classes = [IsAuthenticated, IsMarketplaceUser]

    def get(self, request):
        stats = self.get_engine().analytics(request.user)
        stats = {k: str(v) if k in ("total_spent", "total_revenue") else v for k, v in stats.items()}
        return envelope("Analytics retrieved successfully", {"analytics": stats})
