"""
E-Learning Order Models

Models:
- Order: immutable purchase intent with a small state machine
- OrderItem: price snapshot of one course inside an order

State machine:
    pending ──► completed   (fulfillment, exactly once, terminal)
    pending ──► expired     (terminal, not triggered automatically)
    pending ──► failed      (terminal)

``total_amount`` and every ``OrderItem.price`` are snapshots taken when the
order is created. Later catalog price changes never touch existing orders.

Author: DSP Development Team
Version: 1.0.0
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..courses.models import Course


class Order(models.Model):
    """
    Purchase of one or more courses at a fixed price.

    Attributes:
        user: Buyer
        total_amount: Σ item price × quantity at creation time, never recomputed
        currency: ISO currency code (lower case, as the gateway expects)
        status: Lifecycle state, see module docstring
        payment_method: Name of the gateway that handles the payment
        external_session_id: Checkout session id issued by the gateway
        payment_intent_id: Gateway payment reference reported on completion
        payment_url: Where the buyer is sent to pay
        expires_at: Recorded expiry of the pending order (not enforced)
        paid_at: Timestamp of the pending → completed transition
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Offen")
        COMPLETED = "completed", _("Abgeschlossen")
        EXPIRED = "expired", _("Abgelaufen")
        FAILED = "failed", _("Fehlgeschlagen")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("User"),
    )

    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        verbose_name=_("Total Amount"),
    )

    currency = models.CharField(max_length=3, verbose_name=_("Currency"))

    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_("Status"),
    )

    payment_method = models.CharField(
        max_length=32,
        verbose_name=_("Payment Method"),
        help_text=_("Gateway that handles the payment (mock, stripe)"),
    )

    external_session_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        verbose_name=_("Gateway Session ID"),
    )

    payment_intent_id = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name=_("Payment Intent ID"),
    )

    payment_url = models.CharField(
        max_length=2000,
        blank=True,
        default="",
        verbose_name=_("Payment URL"),
    )

    expires_at = models.DateTimeField(verbose_name=_("Expires At"))

    paid_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Paid At"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created At"))

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.get_status_display()}) - {self.total_amount} {self.currency.upper()}"

    class Meta:
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-created_at"]
        db_table = "elearning_order"
        indexes = [
            models.Index(fields=["user", "status"], name="order_user_status_idx"),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    @property
    def is_expired(self) -> bool:
        """True once a still pending order is past ``expires_at``. Read-only, nothing acts on it."""
        return self.is_pending and timezone.now() >= self.expires_at

    def mark_terminal(self, status: str) -> bool:
        """
        Move a pending order to ``expired`` or ``failed``.

        The transition is a conditional update, so it loses against a
        concurrent fulfillment instead of overwriting ``completed``.

        Returns:
            True if this call performed the transition
        """
        if status not in (self.Status.EXPIRED, self.Status.FAILED):
            raise ValueError(f"'{status}' is not an alternate terminal state.")

        updated = Order.objects.filter(pk=self.pk, status=self.Status.PENDING).update(status=status)
        if updated:
            self.status = status
        return bool(updated)


class OrderItem(models.Model):
    """
    Line-item price snapshot belonging to an order.

    Attributes:
        order: Parent order
        course: Purchased course
        price: Unit price at order creation
        quantity: Number of units
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Order"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name="order_items",
        verbose_name=_("Course"),
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        verbose_name=_("Unit Price"),
    )

    quantity = models.PositiveIntegerField(default=1, verbose_name=_("Quantity"))

    def __str__(self) -> str:
        return f"{self.course.title} x{self.quantity} @ {self.price}"

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        unique_together = ("order", "course")
        ordering = ["order", "id"]
        db_table = "elearning_order_item"

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
