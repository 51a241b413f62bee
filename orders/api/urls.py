from django.urls import path
from .views import (
    OrderAcceptAPIView,
    OrderAnalyticsAPIView,
    OrderCancelAPIView,
    OrderDetailAPIView,
    OrderListCreateAPIView,
    OrderRejectAPIView,
    OrderStatusUpdateAPIView,
)

urlpatterns = [
    path("orders/", OrderListCreateAPIView.as_view(), name="order-list"),
    path("orders/analytics/", OrderAnalyticsAPIView.as_view(), name="order-analytics"),
    path("orders/<int:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("orders/<int:pk>/status/", OrderStatusUpdateAPIView.as_view(), name="order-status"),
    path("orders/<int:pk>/accept/", OrderAcceptAPIView.as_view(), name="order-accept"),
    path("orders/<int:pk>/reject/", OrderRejectAPIView.as_view(), name="order-reject"),
    path("orders/<int:pk>/cancel/", OrderCancelAPIView.as_view(), name="order-cancel"),
]
