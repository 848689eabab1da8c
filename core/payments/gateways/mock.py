"""
Mock Payment Gateway
====================

Deterministic gateway for local end-to-end testing without a real payment
processor.

- Session ids are ``mock_session_<order id>``, customer ids ``mock_cus_<user id>``.
- The redirect URL points to the frontend's mock payment page.
- Every known session is reported as paid, so the buyer's "I paid" call
  (``POST /api/elearning/orders/<id>/confirm/``) completes the order.
- Signals use the Stripe event shape. With ``PAYMENT_WEBHOOK_SECRET`` set they
  must carry ``HMAC-SHA256(secret, raw body)`` as hex digest.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional
from urllib.parse import urlencode

from django.apps import apps

from ..exceptions import InvalidSignature
from .base import CheckoutSession, GatewayEvent, PaymentGateway, SessionStatus

logger = logging.getLogger(__name__)

SESSION_PREFIX = "mock_session_"


def sign_payload(payload: bytes, secret: str) -> str:
    """Signature the mock gateway expects for ``payload``."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


class MockPaymentGateway(PaymentGateway):
    name = "mock"

    def __init__(self, frontend_url: str, webhook_secret: str = "") -> None:
        self.frontend_url = frontend_url.rstrip("/")
        self.webhook_secret = webhook_secret

    def create_checkout_session(self, order, customer_id: Optional[str] = None) -> CheckoutSession:
        query = urlencode({"order_id": order.pk, "amount": f"{order.total_amount:.2f}"})
        return CheckoutSession(
            session_id=f"{SESSION_PREFIX}{order.pk}",
            redirect_url=f"{self.frontend_url}/payment/mock?{query}",
        )

    def verify_signal(self, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        if not self.webhook_secret:
            logger.warning("PAYMENT_WEBHOOK_SECRET not configured, accepting unsigned mock signal.")
            return self._parse_event(payload, trusted=False)

        expected = sign_payload(payload, self.webhook_secret)
        if not signature or not hmac.compare_digest(expected, signature.strip()):
            raise InvalidSignature()
        return self._parse_event(payload, trusted=True)

    def retrieve_session_status(self, session_id: str) -> SessionStatus:
        Order = apps.get_model("elearning", "Order")
        order = (
            Order.objects.select_related("user")
            .filter(external_session_id=session_id)
            .first()
        )
        if order is None:
            return SessionStatus(session_id=session_id, paid=False)

        # Mock approves every session it issued.
        return SessionStatus(
            session_id=session_id,
            paid=True,
            amount=order.total_amount,
            currency=order.currency,
            payer_email=order.user.email or None,
        )

    def _create_customer(self, user, email: str, display_name: str) -> str:
        return f"mock_cus_{user.pk}"
