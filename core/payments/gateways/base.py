"""
Payment Gateway Adapter Interface
=================================

Uniform interface between the checkout core and an external payment
processor. The order factory, the fulfillment engine and the webhook
ingestion only talk to a gateway through these operations:

- ``create_checkout_session(order, customer_id)`` → hosted checkout + redirect URL
- ``verify_signal(payload, signature)``            → authenticated ``GatewayEvent``
- ``retrieve_session_status(session_id)``          → ``SessionStatus``
- ``ensure_customer(user, email, display_name)``   → external customer id

Implementations:
- ``MockPaymentGateway``   (mock.py)            deterministic, local development
- ``StripePaymentGateway`` (stripe_gateway.py)  hosted Stripe Checkout

Trust model
-----------
When a shared secret is configured, a signal whose signature does not verify
raises ``InvalidSignature``. Without a secret the payload is accepted
unsigned and the resulting event carries ``trusted=False`` (reduced-trust
development mode). Malformed payloads are always rejected.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from ..exceptions import InvalidSignature
from ..models import ExternalCustomerRecord

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
PAYMENT_SUCCEEDED = "payment_intent.succeeded"


@dataclass(frozen=True)
class CheckoutSession:
    """Hosted checkout created at the gateway for one order."""

    session_id: str
    redirect_url: str


@dataclass(frozen=True)
class SessionStatus:
    """Payment state of a checkout session as reported by the gateway."""

    session_id: str
    paid: bool
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    payer_email: Optional[str] = None


@dataclass(frozen=True)
class GatewayEvent:
    """
    Inbound gateway signal after verification.

    ``data`` is the event's ``data.object`` payload (e.g. the checkout session).
    """

    id: Optional[str]
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    trusted: bool = True


class PaymentGateway(ABC):
    """
    Base class for payment gateway adapters.

    Subclasses implement the transport specific parts. ``ensure_customer`` is
    shared because the local customer mapping is the same for every gateway.
    """

    name: str = ""

    @abstractmethod
    def create_checkout_session(self, order, customer_id: Optional[str] = None) -> CheckoutSession:
        """Create a hosted checkout for ``order``. Raises ``GatewayUnavailable``."""

    @abstractmethod
    def verify_signal(self, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        """Authenticate and parse an inbound signal. Raises ``InvalidSignature``."""

    @abstractmethod
    def retrieve_session_status(self, session_id: str) -> SessionStatus:
        """Look up the payment state of a checkout session."""

    @abstractmethod
    def _create_customer(self, user, email: str, display_name: str) -> str:
        """Create a customer identity at the gateway and return its id."""

    def publishable_config(self) -> Dict[str, Any]:
        """Configuration the frontend needs to start a checkout."""
        return {"gateway": self.name}

    def ensure_customer(self, user, email: Optional[str] = None, display_name: Optional[str] = None) -> str:
        """
        Return the gateway customer id of ``user``, creating it on first use.

        The user row is locked while the mapping is checked so that two first
        checkouts of the same user cannot both create a gateway customer.
        A mapping issued by a different gateway (e.g. after switching from the
        mock gateway to Stripe) is replaced.

        Args:
            user: Buyer
            email: Email stored at the gateway (defaults to ``user.email``)
            display_name: Name stored at the gateway (defaults to full name/username)

        Returns:
            The external customer id
        """
        email = email or user.email
        display_name = display_name or user.get_full_name() or user.get_username()

        with transaction.atomic():
            list(
                get_user_model()
                .objects.select_for_update()
                .filter(pk=user.pk)
                .values_list("pk", flat=True)
            )
            record = ExternalCustomerRecord.objects.filter(user=user).first()
            if record is not None and record.gateway == self.name:
                return record.external_customer_id

            customer_id = self._create_customer(user, email, display_name)
            if record is None:
                ExternalCustomerRecord.objects.create(
                    user=user, external_customer_id=customer_id, gateway=self.name
                )
            else:
                logger.info(
                    "Replacing %s customer %s of user %s with %s customer.",
                    record.gateway, record.external_customer_id, user.pk, self.name,
                )
                record.external_customer_id = customer_id
                record.gateway = self.name
                record.save(update_fields=["external_customer_id", "gateway"])

        logger.info("Created %s customer %s for user %s.", self.name, customer_id, user.pk)
        return customer_id

    # ---------- helpers ----------

    @staticmethod
    def _parse_event(payload: bytes, *, trusted: bool) -> GatewayEvent:
        """
        Decode a Stripe-shaped event: ``{"id", "type", "data": {"object": {...}}}``.

        Raises:
            InvalidSignature: if the payload is not a JSON object with a type
        """
        try:
            raw = json.loads(payload.decode("utf-8") if isinstance(payload, bytes) else payload)
        except (UnicodeDecodeError, ValueError) as exc:
            raise InvalidSignature("Malformed webhook payload.") from exc

        if not isinstance(raw, dict) or not raw.get("type"):
            raise InvalidSignature("Malformed webhook payload.")

        data = raw.get("data") or {}
        obj = data.get("object") if isinstance(data, dict) else None
        return GatewayEvent(
            id=raw.get("id"),
            type=raw["type"],
            data=obj if isinstance(obj, dict) else {},
            trusted=trusted,
        )
