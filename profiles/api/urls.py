from django.urls import path
from .views import ProfileView, SupplierListView

urlpatterns = [
    path("profile/<int:pk>/", ProfileView.as_view(), name="profile-detail"),
    path("suppliers/", SupplierListView.as_view(), name="supplier-list"),
]
