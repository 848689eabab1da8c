"""
Payments AppConfig
==================

Registers the local ``core.payments`` app (label ``payments``) and builds the
payment gateway adapter exactly once per process.

The adapter selected by ``PAYMENT_GATEWAY`` is stored on the app config and
handed to the order factory, the fulfillment engine and the webhook
ingestion explicitly (see ``gateways.get_payment_gateway``). There is no
module-level client and no global ``stripe.api_key``.

Operational notes
-----------------
- ``ready()`` runs on every process start; it only reads settings, no
  DB/network calls.
- A misconfigured gateway (e.g. Stripe without secret key) fails at startup
  with ``ImproperlyConfigured`` instead of on the first checkout.

Author: DSP Development Team
Date: 2025-09-03
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """
    App configuration for the `core.payments` package.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "core.payments"
    label = "payments"
    verbose_name = "Payments"

    gateway = None

    def ready(self):
        from .gateways import build_gateway

        self.gateway = build_gateway()
