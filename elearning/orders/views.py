"""
E-Learning Order Views

Endpoints
---------
1. OrderListCreateView
   - URL: /api/elearning/orders/
   - GET: own orders with items
   - POST: checkout. Body optional ``{"course_ids": [1, 2]}``; without it the
     cart is checked out. Answers 201 ``{"order": {...}}`` including the
     gateway ``payment_url``.

2. OrderDetailView
   - URL: /api/elearning/orders/<id>/
   - GET: own order detail, 404 for foreign orders

3. ConfirmOrderView
   - URL: /api/elearning/orders/<id>/confirm/
   - POST: buyer's "I paid" confirmation (mock flow). 200 with the
     ``already_processed`` flag on repeated calls.

Every ``CheckoutError`` is answered with ``exc.to_dict()`` and its status code.

Author: DSP Development Team
Date: 2025-09-03
"""

import logging

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.payments.exceptions import CheckoutError
from core.payments.gateways import get_payment_gateway

from ..enrollments.serializers import EnrollmentSerializer
from .factory import OrderFactory
from .fulfillment import FulfillmentEngine
from .models import Order
from .serializers import CreateOrderSerializer, OrderCreatedSerializer, OrderSerializer

logger = logging.getLogger(__name__)


class OrderListCreateView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Order.objects.filter(user=self.request.user).prefetch_related("items__course")

    def post(self, request):
        body = CreateOrderSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        factory = OrderFactory(get_payment_gateway())
        try:
            created = factory.create_order(request.user, body.validated_data.get("course_ids"))
        except CheckoutError as exc:
            logger.info("Checkout of user %s rejected: %s", request.user.pk, exc.error_code)
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {"order": OrderCreatedSerializer(created.order).data},
            status=status.HTTP_201_CREATED,
        )


class OrderDetailView(generics.RetrieveAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Order.objects.filter(user=self.request.user).prefetch_related("items__course")


class ConfirmOrderView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        engine = FulfillmentEngine(get_payment_gateway())
        try:
            outcome = engine.confirm_payment(pk, request.user)
        except CheckoutError as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {
                "order": OrderSerializer(outcome.order).data,
                "already_processed": outcome.already_processed,
                "enrollments": EnrollmentSerializer(outcome.enrollments_created, many=True).data,
            },
            status=status.HTTP_200_OK,
        )
