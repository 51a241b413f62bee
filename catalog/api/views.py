"""Catalog API views.

List and create products on the same endpoint with pagination, searching,
and filtering. Retrieve, patch, and delete are provided on the product
detail route; delete deactivates the product, since ordered products must
stay referenced by their order lines. Stock has its own route so that it
only ever changes under a row lock or through a guarded ``F()`` update.
"""

from decimal import Decimal, InvalidOperation

from django.db.models import Avg, Count, Q
from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api.pagination import DefaultPagination
from common.api.responses import envelope, paginated_envelope
from catalog.exceptions import ProductNotFound
from catalog.models import Product
from catalog.services import ProductCatalog
from profiles.api.permissions import IsSupplier
from .permissions import IsProductOwner
from .serializers import (
    CategorySummarySerializer,
    ProductPatchSerializer,
    ProductSerializer,
    ProductWriteSerializer,
    StockUpdateSerializer,
)


def _parse_decimal(params, name):
    value = params.get(name)
    if value is None:
        return None
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValidationError({name: "Must be a number."})


class ProductListCreateAPIView(generics.ListCreateAPIView):
    """GET: paginated list with filters; POST: create product (supplier-only)."""

    queryset = Product.objects.select_related("supplier", "supplier__profile")
    pagination_class = DefaultPagination

    def get_permissions(self):
        """Allow only suppliers to create products; list is public."""
        if self.request.method == "POST":
            return [IsAuthenticated(), IsSupplier()]
        return [AllowAny()]

    def get_serializer_class(self):
        if self.request.method == "GET":
            return ProductSerializer
        return ProductWriteSerializer

    def get_queryset(self):
        qs = super().get_queryset().filter(is_active=True)
        qs = self._apply_filters(qs, self.request.query_params)
        return self._apply_ordering(qs, self.request.query_params.get("ordering"))

    # --- helpers ---
    def _apply_filters(self, qs, params):
        category = params.get("category")
        if category is not None:
            if category not in Product.Category.values:
                raise ValidationError({"category": "Invalid category."})
            qs = qs.filter(category=category)

        supplier_id = params.get("supplier_id")
        if supplier_id is not None:
            if not supplier_id.isdigit():
                raise ValidationError({"supplier_id": "Must be an integer."})
            qs = qs.filter(supplier_id=int(supplier_id))

        min_price = _parse_decimal(params, "min_price")
        if min_price is not None:
            qs = qs.filter(price_amount__gte=min_price)

        max_price = _parse_decimal(params, "max_price")
        if max_price is not None:
            qs = qs.filter(price_amount__lte=max_price)

        search = params.get("search")
        if search:
            if len(search) < 2:
                raise ValidationError({"search": "Search term must be at least 2 characters."})
            qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))

        return qs

    def _apply_ordering(self, qs, ordering):
        if not ordering:
            return qs.order_by("-updated_at", "id")

        allowed = {"updated_at", "-updated_at", "price_amount", "-price_amount", "name", "-name"}
        if ordering not in allowed:
            raise ValidationError(
                {"ordering": "Allowed values: " + ", ".join(sorted(allowed)) + "."}
            )
        return qs.order_by(ordering, "id")

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = ProductSerializer(page, many=True).data
        return paginated_envelope(
            self.paginator, "Products retrieved successfully", "products", data
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        return envelope(
            "Product created successfully",
            {"product": ProductSerializer(product).data},
            status=status.HTTP_201_CREATED,
        )


class ProductRetrieveUpdateDestroyAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET: retrieve product, PATCH: update (owner only), DELETE: deactivate (owner only)."""

    queryset = Product.objects.select_related("supplier", "supplier__profile")
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_permissions(self):
        """Enforce product ownership for modifications; reads are public."""
        if self.request.method in ["PATCH", "DELETE"]:
            return [IsAuthenticated(), IsProductOwner()]
        return [AllowAny()]

    def get_serializer_class(self):
        if self.request.method == "PATCH":
            return ProductPatchSerializer
        return ProductSerializer

    def retrieve(self, request, *args, **kwargs):
        product = self.get_object()
        return envelope("Product retrieved successfully", {"product": ProductSerializer(product).data})

    def partial_update(self, request, *args, **kwargs):
        """Perform a partial update and return the full product payload."""
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        instance.refresh_from_db()
        return envelope("Product updated successfully", {"product": ProductSerializer(instance).data})

    def destroy(self, request, *args, **kwargs):
        """Deactivate the product and respond with 204 No Content."""
        instance = self.get_object()
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductStockAPIView(APIView):
    """PATCH /api/products/<id>/stock/ -> set or adjust stock (owning supplier)."""

    permission_classes = [IsAuthenticated, IsSupplier, IsProductOwner]

    def patch(self, request, pk):
        product = Product.objects.filter(pk=pk, is_active=True).first()
        if product is None:
            raise ProductNotFound(product_id=pk)
        self.check_object_permissions(request, product)

        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        catalog = ProductCatalog()
        if "available_quantity" in serializer.validated_data:
            product = catalog.set_available(pk, serializer.validated_data["available_quantity"])
        else:
            product = catalog.adjust_available(pk, serializer.validated_data["adjustment"])
        return envelope(
            "Stock updated successfully",
            {
                "product": {
                    "id": product.pk,
                    "name": product.name,
                    "available_quantity": product.available_quantity,
                }
            },
        )


class ProductCategoryListAPIView(APIView):
    """GET /api/products/categories/ -> active product count and average price per category."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        rows = (
            Product.objects.filter(is_active=True)
            .values("category")
            .annotate(count=Count("id"), avg_price=Avg("price_amount"))
            .order_by("category")
        )
        return envelope(
            "Categories retrieved successfully",
            {"categories": CategorySummarySerializer(rows, many=True).data},
        )


class SupplierProductListAPIView(generics.ListAPIView):
    """GET /api/products/supplier/my-products/ -> the caller's own products.

    ``status`` selects ``active`` (default), ``inactive`` or ``all``.
    """

    permission_classes = [IsAuthenticated, IsSupplier]
    pagination_class = DefaultPagination
    serializer_class = ProductSerializer

    def get_queryset(self):
        qs = Product.objects.select_related("supplier", "supplier__profile").filter(
            supplier=self.request.user
        )
        state = self.request.query_params.get("status", "active")
        if state == "active":
            qs = qs.filter(is_active=True)
        elif state == "inactive":
            qs = qs.filter(is_active=False)
        elif state != "all":
            raise ValidationError({"status": "Allowed values: active, inactive, all."})
        return qs.order_by("-created_at", "-id")

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = ProductSerializer(page, many=True).data
        return paginated_envelope(
            self.paginator, "Products retrieved successfully", "products", data
        )
