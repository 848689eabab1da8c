"""
Stripe Payment Gateway
======================

Live gateway backed by hosted Stripe Checkout.

Flow
----
1. The order factory asks for a checkout session. We create a Stripe
   Checkout Session in ``payment`` mode with one ``price_data`` line per
   order item (amounts in minor units) and metadata ``{order_id, user_id}``.
2. The buyer pays on Stripe and is redirected to the frontend.
3. Stripe delivers ``checkout.session.completed`` to ``/api/payments/webhook/``.
   ``verify_signal`` checks the ``Stripe-Signature`` header with
   ``stripe.Webhook.construct_event`` before anything else happens.

All SDK calls pass ``api_key``/``stripe_version`` per request; the module
never assigns ``stripe.api_key`` globally.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import stripe

from ..exceptions import GatewayUnavailable, InvalidSignature
from .base import CheckoutSession, GatewayEvent, PaymentGateway, SessionStatus

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a decimal amount (e.g. ``Decimal("29.90")``) to cents."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripePaymentGateway(PaymentGateway):
    name = "stripe"

    def __init__(
        self,
        api_key: str,
        frontend_url: str,
        webhook_secret: str = "",
        api_version: Optional[str] = None,
        publishable_key: str = "",
    ) -> None:
        self.api_key = api_key
        self.frontend_url = frontend_url.rstrip("/")
        self.webhook_secret = webhook_secret
        self.api_version = api_version
        self.publishable_key = publishable_key

    def _request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"api_key": self.api_key}
        if self.api_version:
            options["stripe_version"] = self.api_version
        return options

    def publishable_config(self) -> Dict[str, Any]:
        return {"gateway": self.name, "publishableKey": self.publishable_key}

    def create_checkout_session(self, order, customer_id: Optional[str] = None) -> CheckoutSession:
        line_items = []
        for item in order.items.select_related("course"):
            product_data: Dict[str, Any] = {"name": item.course.title}
            if item.course.short_description:
                product_data["description"] = item.course.short_description
            line_items.append(
                {
                    "price_data": {
                        "currency": order.currency,
                        "product_data": product_data,
                        "unit_amount": to_minor_units(item.price),
                    },
                    "quantity": item.quantity,
                }
            )

        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": line_items,
            "success_url": (
                f"{self.frontend_url}/payment/success"
                f"?session_id={{CHECKOUT_SESSION_ID}}&order_id={order.pk}"
            ),
            "cancel_url": f"{self.frontend_url}/payment/cancel?order_id={order.pk}",
            "metadata": {"order_id": str(order.pk), "user_id": str(order.user_id)},
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            session = stripe.checkout.Session.create(**params, **self._request_options())
        except stripe.StripeError as exc:
            logger.exception("Stripe checkout session creation failed for order %s.", order.pk)
            raise GatewayUnavailable() from exc

        logger.info("Stripe checkout session %s created for order %s.", session["id"], order.pk)
        return CheckoutSession(session_id=session["id"], redirect_url=session["url"])

    def verify_signal(self, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        if not self.webhook_secret:
            logger.warning("STRIPE_WEBHOOK_SECRET not configured, processing event without verification.")
            return self._parse_event(payload, trusted=False)

        if not signature:
            raise InvalidSignature()
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise InvalidSignature() from exc
        except ValueError as exc:
            raise InvalidSignature("Malformed webhook payload.") from exc
        return self._parse_event(payload, trusted=True)

    def retrieve_session_status(self, session_id: str) -> SessionStatus:
        try:
            session = stripe.checkout.Session.retrieve(session_id, **self._request_options())
        except stripe.StripeError as exc:
            logger.exception("Stripe session lookup failed for %s.", session_id)
            raise GatewayUnavailable() from exc

        amount_total = session.get("amount_total")
        customer_details = session.get("customer_details") or {}
        return SessionStatus(
            session_id=session_id,
            paid=session.get("payment_status") == "paid",
            amount=Decimal(amount_total) / 100 if amount_total is not None else None,
            currency=session.get("currency"),
            payer_email=customer_details.get("email"),
        )

    def _create_customer(self, user, email: str, display_name: str) -> str:
        try:
            customer = stripe.Customer.create(
                email=email,
                name=display_name,
                metadata={"user_id": str(user.pk)},
                **self._request_options(),
            )
        except stripe.StripeError as exc:
            logger.exception("Stripe customer creation failed for user %s.", user.pk)
            raise GatewayUnavailable() from exc
        return customer["id"]
