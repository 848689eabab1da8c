"""
E-Learning Course Catalog Models

Models:
- Course: purchasable course with price, publication status and enrollment counter

The checkout only reads price and availability at query time and maintains
``students_count``. Course authoring, lessons and quizzes live elsewhere.

Author: DSP Development Team
Version: 1.0.0
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _


class Course(models.Model):
    """
    Purchasable course.

    Attributes:
        title: Unique course title
        short_description: Teaser shown at checkout
        price: Current catalog price (orders keep their own snapshot)
        status: Publication status, only published courses can be bought
        students_count: Number of distinct users ever enrolled

    Example:
        >>> course = Course.objects.create(title="SQL Basics", price=Decimal("30.00"))
        >>> course.is_purchasable
        True
    """

    class Status(models.TextChoices):
        DRAFT = "draft", _("Entwurf")
        PUBLISHED = "published", _("Veröffentlicht")
        ARCHIVED = "archived", _("Archiviert")

    title = models.CharField(
        max_length=200,
        unique=True,
        verbose_name=_("Course Title"),
        help_text=_("The unique title of the course"),
    )

    short_description = models.CharField(
        max_length=500,
        blank=True,
        verbose_name=_("Short Description"),
        help_text=_("Teaser shown in the cart and on the checkout page"),
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        verbose_name=_("Price"),
        help_text=_("Current catalog price in the shop currency"),
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PUBLISHED,
        verbose_name=_("Status"),
        help_text=_("Only published courses can be added to a cart or bought"),
    )

    students_count = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Students"),
        help_text=_("Number of distinct users enrolled in this course"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created At"))

    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated At"))

    def __str__(self) -> str:
        """String representation of the course."""
        return self.title

    class Meta:
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")
        ordering = ["title"]
        db_table = "elearning_course"

    @property
    def is_purchasable(self) -> bool:
        return self.status == self.Status.PUBLISHED

    @staticmethod
    def purchasable() -> QuerySet["Course"]:
        """All courses currently available for purchase."""
        return Course.objects.filter(status=Course.Status.PUBLISHED)
