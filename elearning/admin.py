"""
E-Learning Application Django Admin Configuration

This module provides the Django admin interface configuration for the course
shop models.

The admin interface is organized into logical sections:
- Catalog: Courses with price, status and enrollment counter
- Carts: Per-user cart lines
- Orders: Orders with their price snapshots (read-only) and the
  "fulfil selected pending orders" action
- Enrollments: Course access records

Orders and order items are immutable records of a purchase, so the admin
only shows them. Completing an order from the admin goes through the
FulfillmentEngine like every other entry point.

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from core.payments.exceptions import CheckoutError
from core.payments.gateways import get_payment_gateway

from .models import CartItem, Course, Enrollment, Order, OrderItem
from .enrollments.services import grant_enrollment
from .orders.fulfillment import FulfillmentEngine, OrderRef

# --- Catalog Administration ---


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    """Administration interface for the course catalog."""

    list_display = ("title", "price", "status", "students_count", "updated_at")
    list_filter = ("status",)
    search_fields = ("title", "short_description")
    readonly_fields = ("students_count", "created_at", "updated_at")

    fieldsets = (
        (_("Basic Information"), {"fields": ("title", "short_description")}),
        (_("Sales"), {"fields": ("price", "status", "students_count")}),
        (
            _("Timestamps"),
            {"fields": ("created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )


# --- Cart Administration ---


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("user", "course", "quantity", "added_at")
    list_filter = ("added_at",)
    search_fields = ("user__username", "user__email", "course__title")
    autocomplete_fields = ("user", "course")
    readonly_fields = ("added_at",)


# --- Order Administration ---


class OrderItemInline(admin.TabularInline):
    """Read-only price snapshots of an order."""

    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("course", "price", "quantity")
    readonly_fields = fields

    def has_add_permission(self, request: HttpRequest, obj=None) -> bool:
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Administration interface for orders.

    Orders are created by the checkout only. The single mutating operation
    offered here is the administrative fulfillment action.
    """

    list_display = (
        "id",
        "user",
        "total_amount",
        "currency",
        "status",
        "payment_method",
        "created_at",
        "paid_at",
    )
    list_filter = ("status", "payment_method", "created_at")
    search_fields = ("id", "user__username", "user__email", "external_session_id", "payment_intent_id")
    readonly_fields = (
        "user",
        "total_amount",
        "currency",
        "status",
        "payment_method",
        "external_session_id",
        "payment_intent_id",
        "payment_url",
        "expires_at",
        "paid_at",
        "created_at",
    )
    inlines = [OrderItemInline]
    actions = ["fulfil_selected_orders"]

    fieldsets = (
        (_("Order"), {"fields": ("user", "status", "total_amount", "currency")}),
        (
            _("Payment"),
            {
                "fields": (
                    "payment_method",
                    "external_session_id",
                    "payment_intent_id",
                    "payment_url",
                )
            },
        ),
        (_("Timestamps"), {"fields": ("created_at", "expires_at", "paid_at")}),
    )

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Orders are only created through the checkout API."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("user")

    @admin.action(description=_("Fulfil selected pending orders"))
    def fulfil_selected_orders(self, request: HttpRequest, queryset: QuerySet) -> None:
        """
        Complete the selected orders without asking the gateway.

        Already completed orders are reported as skipped.
        """
        engine = FulfillmentEngine(get_payment_gateway())
        fulfilled = skipped = 0
        for order_id in queryset.values_list("pk", flat=True):
            try:
                outcome = engine.force_fulfill(OrderRef(order_id=order_id), verify_payment=False)
            except CheckoutError as exc:
                self.message_user(request, f"Order #{order_id}: {exc.message}", level=messages.ERROR)
                continue
            if outcome.transitioned:
                fulfilled += 1
            else:
                skipped += 1

        self.message_user(
            request,
            _("%(fulfilled)d order(s) fulfilled, %(skipped)d already processed.")
            % {"fulfilled": fulfilled, "skipped": skipped},
            level=messages.SUCCESS,
        )


# --- Enrollment Administration ---


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    """Administration interface for course access records."""

    list_display = ("user", "course", "source", "status", "progress_percentage", "started_at")
    list_filter = ("source", "status", "course")
    search_fields = ("user__username", "user__email", "course__title")
    autocomplete_fields = ("user", "course")
    readonly_fields = ("order", "source", "started_at")
    grant_readonly_fields = ("status", "progress_percentage", "completed_at", "certificate_url")

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("user", "course", "order")

    def get_readonly_fields(self, request: HttpRequest, obj=None):
        """A grant always starts active at 0 %, only user and course are editable on add."""
        if obj is None:
            return self.readonly_fields + self.grant_readonly_fields
        return self.readonly_fields

    def save_model(self, request: HttpRequest, obj: Enrollment, form, change: bool) -> None:
        """New enrollments from the admin are administrative grants and count as students."""
        if change:
            super().save_model(request, obj, form, change)
            return
        enrollment, _created = grant_enrollment(obj.user, obj.course, source=Enrollment.Source.ADMIN_GRANT)
        obj.pk = enrollment.pk
