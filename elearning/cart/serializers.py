"""
E-Learning Cart Serializers

Author: DSP Development Team
Version: 1.0.0
"""

from rest_framework import serializers

from .models import CartItem


class CartItemSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)
    short_description = serializers.CharField(source="course.short_description", read_only=True)
    price = serializers.DecimalField(source="course.price", max_digits=10, decimal_places=2, read_only=True)
    available = serializers.BooleanField(source="course.is_purchasable", read_only=True)

    class Meta:
        model = CartItem
        fields = ("id", "course", "course_title", "short_description", "price", "available", "quantity", "added_at")
        read_only_fields = fields


class AddToCartSerializer(serializers.Serializer):
    course_id = serializers.IntegerField(min_value=1)
