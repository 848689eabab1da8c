"""
E-Learning Enrollment Models

Models:
- Enrollment: durable proof of a user's access to a course

An enrollment is created either by the fulfillment engine (``source=order``,
``order`` set) or by an administrator (``source=admin_grant``, no order).
The database refuses a second row for the same (user, course).

Author: DSP Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..courses.models import Course


class Enrollment(models.Model):
    """
    Access of one user to one course.

    Attributes:
        user: Enrolled user
        course: Course the user has access to
        order: Order that paid for the access (null for administrative grants)
        source: How the access was granted
        status: Learning status
        progress_percentage: Learning progress 0..100
        started_at: Timestamp of the grant
        completed_at: Timestamp of course completion
        certificate_url: Link to the generated certificate
    """

    class Status(models.TextChoices):
        ACTIVE = "active", _("Aktiv")
        COMPLETED = "completed", _("Abgeschlossen")

    class Source(models.TextChoices):
        ORDER = "order", _("Bestellung")
        ADMIN_GRANT = "admin_grant", _("Administrator")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("User"),
    )

    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name="enrollments",
        verbose_name=_("Course"),
    )

    order = models.ForeignKey(
        "elearning.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="enrollments",
        verbose_name=_("Order"),
        help_text=_("Order that paid for this access, empty for administrative grants"),
    )

    source = models.CharField(
        max_length=20,
        choices=Source.choices,
        default=Source.ORDER,
        verbose_name=_("Source"),
    )

    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.ACTIVE,
        verbose_name=_("Status"),
    )

    progress_percentage = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("Progress (%)"),
    )

    started_at = models.DateTimeField(default=timezone.now, verbose_name=_("Started At"))

    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed At"))

    certificate_url = models.CharField(
        max_length=1000,
        blank=True,
        default="",
        verbose_name=_("Certificate URL"),
    )

    def __str__(self) -> str:
        return f"{self.user} → {self.course.title} ({self.get_status_display()})"

    class Meta:
        verbose_name = _("Enrollment")
        verbose_name_plural = _("Enrollments")
        ordering = ["-started_at"]
        db_table = "elearning_enrollment"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "course"], name="unique_enrollment_per_user_course"
            ),
        ]
