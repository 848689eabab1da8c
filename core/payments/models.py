"""
Payment Gateway Models

Models:
- ExternalCustomerRecord: cached mapping user → customer identity at the gateway

The mapping is created lazily on the first checkout attempt of a user and
reused afterwards, so the gateway is never asked to create a second customer
for the same user.

Author: DSP Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class ExternalCustomerRecord(models.Model):
    """
    Customer identity of a user at the external payment gateway.

    Attributes:
        user: Buyer (one record per user)
        external_customer_id: Identifier issued by the gateway (e.g. ``cus_...``)
        gateway: Name of the gateway that issued the identifier
        created_at: Timestamp of the first checkout attempt
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="external_customer",
        verbose_name=_("User"),
        help_text=_("Buyer this gateway customer belongs to"),
    )

    external_customer_id = models.CharField(
        max_length=255,
        verbose_name=_("External Customer ID"),
        help_text=_("Customer identifier issued by the payment gateway"),
    )

    gateway = models.CharField(
        max_length=32,
        verbose_name=_("Gateway"),
        help_text=_("Payment gateway that issued the identifier"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created At"))

    def __str__(self) -> str:
        return f"{self.user} → {self.external_customer_id} ({self.gateway})"

    class Meta:
        verbose_name = _("External Customer")
        verbose_name_plural = _("External Customers")
        db_table = "payments_external_customer"
