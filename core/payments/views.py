"""
Payment Views (core.payments)
=============================

REST endpoints around the payment gateway. Checkout itself lives in
``elearning.orders``; these views handle what comes back from the gateway.

Endpoints
---------

1. WebhookView
   - URL: /api/payments/webhook/
   - Method: POST
   - Auth: None (authenticated by signature)
   - Headers: ``Stripe-Signature`` (Stripe) or ``X-Payment-Signature`` (mock)
   - Purpose:
       Verifies the signal and completes the referenced order. 400 on a
       rejected signature, 500 on processing errors so the gateway retries.

2. ForceEnrollmentView
   - URL: /api/payments/force-enrollment/
   - Method: POST
   - Body: {"session_id": "cs_test_..."}
   - Auth: Staff
   - Purpose:
       Administrative override when a webhook never arrived. The gateway
       must report the session as paid.

3. PaymentStatusView
   - URL: /api/payments/status/<session_id>/
   - Method: GET
   - Auth: Required (own orders only)
   - Purpose:
       Order status plus the gateway's view of the session, used by the
       frontend success page. ``session_amount`` and ``customer_email`` come
       from the gateway and may be null.

4. GatewayConfigView
   - URL: /api/payments/config/
   - Method: GET
   - Auth: None
   - Purpose:
       Active gateway name and publishable key for the frontend.

Security
--------
- Webhook payloads are only parsed after signature verification.
- Card data never touches this backend.

Author: DSP Development Team
Date: 2025-09-03
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from elearning.orders.fulfillment import FulfillmentEngine
from elearning.orders.models import Order

from .exceptions import CheckoutError, InvalidSignature, OrderNotFound
from .gateways import get_payment_gateway
from .webhooks import WebhookIngestion

logger = logging.getLogger(__name__)


class WebhookView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        payload = request.body
        signature = request.META.get("HTTP_STRIPE_SIGNATURE") or request.META.get("HTTP_X_PAYMENT_SIGNATURE")

        try:
            result = WebhookIngestion(get_payment_gateway()).handle(payload, signature)
        except InvalidSignature as exc:
            logger.warning("Webhook rejected: %s", exc.message)
            return Response(exc.to_dict(), status=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Webhook processing failed.")
            return Response({"error": "Webhook processing failed."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        body = {"received": True, "event_type": result.event_type, "handled": result.handled}
        if result.outcome is not None:
            body["order_id"] = result.outcome.order.pk
            body["already_processed"] = result.outcome.already_processed
        return Response(body, status=status.HTTP_200_OK)


class ForceEnrollmentView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request):
        session_id = request.data.get("session_id")
        if not session_id:
            return Response({"detail": "session_id is required."}, status=status.HTTP_400_BAD_REQUEST)

        engine = FulfillmentEngine(get_payment_gateway())
        try:
            outcome = engine.force_fulfill_session(session_id)
        except CheckoutError as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        logger.info("Admin %s forced fulfillment of session %s.", request.user.pk, session_id)
        return Response(
            {
                "order_id": outcome.order.pk,
                "status": outcome.order.status,
                "already_processed": outcome.already_processed,
                "enrollments_created": [e.course_id for e in outcome.enrollments_created],
                "enrollments_skipped": outcome.enrollments_skipped,
            },
            status=status.HTTP_200_OK,
        )


class PaymentStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, session_id):
        order = Order.objects.filter(external_session_id=session_id, user=request.user).first()
        if order is None:
            exc = OrderNotFound(reference=f"session:{session_id}")
            return Response(exc.to_dict(), status=exc.status_code)

        try:
            session = get_payment_gateway().retrieve_session_status(session_id)
        except CheckoutError as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {
                "session_id": session_id,
                "order_id": order.pk,
                "order_status": order.status,
                "paid": session.paid,
                "amount": f"{order.total_amount:.2f}",
                "currency": order.currency,
                "session_amount": f"{session.amount:.2f}" if session.amount is not None else None,
                "customer_email": session.payer_email,
            },
            status=status.HTTP_200_OK,
        )


class GatewayConfigView(APIView):
    """
    endpoint so the frontend knows which checkout to start
    """
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(get_payment_gateway().publishable_config(), status=200)
