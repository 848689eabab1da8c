"""
E-Learning Order Serializers

Serializers:
- OrderItemSerializer: price snapshot of one line
- OrderSerializer: order with its items (list/detail)
- OrderCreatedSerializer: compact response after checkout
- CreateOrderSerializer: request body of the checkout endpoint

Author: DSP Development Team
Version: 1.0.0
"""

from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ("id", "course", "course_title", "price", "quantity", "line_total")
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id",
            "total_amount",
            "currency",
            "status",
            "payment_method",
            "external_session_id",
            "payment_url",
            "expires_at",
            "paid_at",
            "created_at",
            "items",
        )
        read_only_fields = fields


class OrderCreatedSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = ("id", "total_amount", "currency", "status", "payment_url", "expires_at")
        read_only_fields = fields


class CreateOrderSerializer(serializers.Serializer):
    """
    Optional body of ``POST /orders/``.

    Without ``course_ids`` the cart is checked out; with it exactly these
    courses are bought.
    """

    course_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        allow_empty=False,
    )
