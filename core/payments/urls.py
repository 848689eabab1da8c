from django.urls import path
from .views import (
    ForceEnrollmentView,
    GatewayConfigView,
    PaymentStatusView,
    WebhookView,
)

app_name = "payments"

urlpatterns = [
    path("config/", GatewayConfigView.as_view(), name="gateway-config"),
    path("webhook/", WebhookView.as_view(), name="webhook"),
    path("force-enrollment/", ForceEnrollmentView.as_view(), name="force-enrollment"),
    path("status/<str:session_id>/", PaymentStatusView.as_view(), name="payment-status"),
]
