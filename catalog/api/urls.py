from django.urls import path
from .views import (
    ProductCategoryListAPIView,
    ProductListCreateAPIView,
    ProductRetrieveUpdateDestroyAPIView,
    ProductStockAPIView,
    SupplierProductListAPIView,
)

urlpatterns = [
    path("products/", ProductListCreateAPIView.as_view(), name="product-list"),
    path("products/categories/", ProductCategoryListAPIView.as_view(), name="product-categories"),
    path("products/supplier/my-products/", SupplierProductListAPIView.as_view(), name="product-mine"),
    path("products/<int:pk>/", ProductRetrieveUpdateDestroyAPIView.as_view(), name="product-detail"),
    path("products/<int:pk>/stock/", ProductStockAPIView.as_view(), name="product-stock"),
]
