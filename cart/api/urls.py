from django.urls import path
from .views import (
    CartItemCreateView,
    CartItemDetailView,
    CartSummaryView,
    CartValidateView,
    CartView,
)

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/items/", CartItemCreateView.as_view(), name="cart-items"),
    path("cart/items/<int:product_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path("cart/summary/", CartSummaryView.as_view(), name="cart-summary"),
    path("cart/validate/", CartValidateView.as_view(), name="cart-validate"),
]
