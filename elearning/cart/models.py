"""
E-Learning Cart Models

Models:
- CartItem: one course in a user's cart

Lifecycle: created on add-to-cart, deleted when removed, and deleted by the
order factory once its course is part of an order.

Author: DSP Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from ..courses.models import Course


class CartItem(models.Model):
    """
    A course waiting in a user's cart.

    Attributes:
        user: Owner of the cart
        course: Course to buy
        quantity: Number of units (courses are normally bought once)
        added_at: Timestamp of add-to-cart
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
        verbose_name=_("User"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="cart_items",
        verbose_name=_("Course"),
    )

    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_("Quantity"),
    )

    added_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Added At"))

    def __str__(self) -> str:
        return f"{self.user} - {self.course.title} x{self.quantity}"

    class Meta:
        verbose_name = _("Cart Item")
        verbose_name_plural = _("Cart Items")
        unique_together = ("user", "course")
        ordering = ["-added_at"]
        db_table = "elearning_cart_item"
