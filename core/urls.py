from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("user_auth_app.api.urls")),
    path("api/", include("profiles.api.urls")),
    path("api/", include("catalog.api.urls")),
    path("api/", include("cart.api.urls")),
    path("api/", include("orders.api.urls")),
    path("api/", include("reviews.api.urls")),
    path("api/", include("common.api.urls")),
]
