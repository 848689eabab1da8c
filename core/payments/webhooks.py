"""
Webhook Ingestion
=================

Authenticates inbound gateway signals and forwards completion events to the
fulfillment engine.

Handled events
--------------
- ``checkout.session.completed``: fulfil the order of the session. An
  unknown session is logged and acknowledged, a redelivery cannot fix it.
- ``payment_intent.succeeded``: informational only, logged.
- anything else: logged at DEBUG and acknowledged.

``InvalidSignature`` is raised by ``gateway.verify_signal`` before any state
is read or written. Errors during fulfillment propagate so the view answers
500 and the gateway redelivers; redelivery is harmless because fulfillment
is idempotent.

Author: DSP Development Team
Date: 2025-09-03
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from elearning.orders.fulfillment import FulfillmentEngine, OrderOutcome, OrderRef

from .exceptions import OrderNotFound
from .gateways import CHECKOUT_COMPLETED, PAYMENT_SUCCEEDED, GatewayEvent, PaymentGateway

logger = logging.getLogger(__name__)


@dataclass
class WebhookResult:
    event_type: str
    handled: bool
    outcome: Optional[OrderOutcome] = None
    trusted: bool = True


class WebhookIngestion:
    def __init__(self, gateway: PaymentGateway, engine: Optional[FulfillmentEngine] = None):
        self.gateway = gateway
        self.engine = engine or FulfillmentEngine(gateway)

    def handle(self, payload: bytes, signature: Optional[str]) -> WebhookResult:
        """
        Verify and dispatch one signal.

        Raises:
            InvalidSignature: signature or payload rejected, nothing was touched
        """
        event = self.gateway.verify_signal(payload, signature)
        logger.info(
            "Webhook %s received (type=%s, trusted=%s).", event.id, event.type, event.trusted
        )

        if event.type == CHECKOUT_COMPLETED:
            return self._checkout_completed(event)

        if event.type == PAYMENT_SUCCEEDED:
            logger.info("Payment intent %s succeeded.", event.data.get("id"))
            return WebhookResult(event_type=event.type, handled=True, trusted=event.trusted)

        logger.debug("Ignoring webhook event type %s.", event.type)
        return WebhookResult(event_type=event.type, handled=False, trusted=event.trusted)

    def _checkout_completed(self, event: GatewayEvent) -> WebhookResult:
        session_id = event.data.get("id")
        if not session_id:
            logger.warning("Webhook %s has no checkout session id, ignoring.", event.id)
            return WebhookResult(event_type=event.type, handled=False, trusted=event.trusted)

        try:
            outcome = self.engine.fulfill_order(
                OrderRef(session_id=session_id),
                payment_intent_id=event.data.get("payment_intent") or None,
            )
        except OrderNotFound:
            logger.warning("Webhook %s references unknown session %s.", event.id, session_id)
            return WebhookResult(event_type=event.type, handled=False, trusted=event.trusted)

        return WebhookResult(
            event_type=event.type, handled=True, outcome=outcome, trusted=event.trusted
        )
