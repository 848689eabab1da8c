"""
Root URL configuration for the DSP course shop backend.

URL Structure:
- /admin/: Django admin (Jazzmin theme)
- /api/token/: JWT token management
- /api/elearning/: Cart, orders, enrollments, administrative grants
- /api/payments/: Gateway webhook, payment status, admin override

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/token/verify/", TokenVerifyView.as_view(), name="token_verify"),
    path("api/elearning/", include("elearning.urls")),
    path("api/payments/", include("core.payments.urls")),
]
