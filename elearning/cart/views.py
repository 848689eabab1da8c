"""
E-Learning Cart Views

Endpoints
---------
- GET    /api/elearning/cart/              cart lines of the current user
- POST   /api/elearning/cart/              add ``{"course_id": 7}``
- DELETE /api/elearning/cart/              clear the cart
- DELETE /api/elearning/cart/<course_id>/  remove one course
- GET    /api/elearning/cart/total/        item count and total at current prices

Prices shown here are catalog prices. The order keeps its own snapshot.

Author: DSP Development Team
Version: 1.0.0
"""

from decimal import Decimal

from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..courses.models import Course
from ..enrollments.services import is_enrolled
from .models import CartItem
from .serializers import AddToCartSerializer, CartItemSerializer


def _cart_of(user):
    return CartItem.objects.filter(user=user).select_related("course")


class CartView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(CartItemSerializer(_cart_of(request.user), many=True).data)

    def post(self, request):
        body = AddToCartSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        course_id = body.validated_data["course_id"]

        course = Course.purchasable().filter(pk=course_id).first()
        if course is None:
            return Response({"detail": "Course not found or not available."}, status=status.HTTP_404_NOT_FOUND)

        if is_enrolled(request.user, course.pk):
            return Response({"detail": "You already own this course."}, status=status.HTTP_400_BAD_REQUEST)

        try:
            with transaction.atomic():
                item = CartItem.objects.create(user=request.user, course=course)
        except IntegrityError:
            return Response({"detail": "Course is already in your cart."}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CartItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def delete(self, request):
        _cart_of(request.user).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, course_id):
        deleted, _ = CartItem.objects.filter(user=request.user, course_id=course_id).delete()
        if not deleted:
            return Response({"detail": "Course is not in your cart."}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartTotalView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = [item for item in _cart_of(request.user) if item.course.is_purchasable]
        total = sum((item.course.price * item.quantity for item in items), Decimal("0.00"))
        return Response(
            {
                "item_count": sum(item.quantity for item in items),
                "total": f"{total:.2f}",
            }
        )
