"""
Payment Gateway Adapters

- build_gateway(): construct the adapter selected by ``PAYMENT_GATEWAY``
- get_payment_gateway(): the instance built once at startup by ``PaymentsConfig``

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import (
    CHECKOUT_COMPLETED,
    PAYMENT_SUCCEEDED,
    CheckoutSession,
    GatewayEvent,
    PaymentGateway,
    SessionStatus,
)
from .mock import MockPaymentGateway, sign_payload
from .stripe_gateway import StripePaymentGateway


def build_gateway(name: Optional[str] = None) -> PaymentGateway:
    """
    Construct a gateway adapter from settings.

    Args:
        name: ``"mock"`` or ``"stripe"``; defaults to ``settings.PAYMENT_GATEWAY``

    Raises:
        ImproperlyConfigured: unknown gateway or Stripe without secret key
    """
    name = (name or settings.PAYMENT_GATEWAY).lower()

    if name == MockPaymentGateway.name:
        return MockPaymentGateway(
            frontend_url=settings.FRONTEND_URL,
            webhook_secret=settings.PAYMENT_WEBHOOK_SECRET,
        )

    if name == StripePaymentGateway.name:
        if not settings.STRIPE_SECRET_KEY:
            raise ImproperlyConfigured(
                "PAYMENT_GATEWAY=stripe requires STRIPE_TEST_SECRET_KEY or STRIPE_LIVE_SECRET_KEY."
            )
        return StripePaymentGateway(
            api_key=settings.STRIPE_SECRET_KEY,
            frontend_url=settings.FRONTEND_URL,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
            api_version=settings.STRIPE_API_VERSION,
            publishable_key=settings.STRIPE_PUBLISHABLE_KEY,
        )

    raise ImproperlyConfigured(f"Unknown PAYMENT_GATEWAY '{name}'.")


def get_payment_gateway() -> PaymentGateway:
    """Gateway instance constructed at process startup."""
    return apps.get_app_config("payments").gateway


__all__ = [
    "CHECKOUT_COMPLETED",
    "PAYMENT_SUCCEEDED",
    "CheckoutSession",
    "GatewayEvent",
    "PaymentGateway",
    "SessionStatus",
    "MockPaymentGateway",
    "StripePaymentGateway",
    "build_gateway",
    "get_payment_gateway",
    "sign_payload",
]
