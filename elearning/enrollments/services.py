"""
Enrollment Grant Service

Single place where an ``Enrollment`` row is created and the course's
``students_count`` is incremented. Both the fulfillment engine and the
administrative grant go through ``grant_enrollment``.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Tuple

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..courses.models import Course
from .models import Enrollment

logger = logging.getLogger(__name__)


def grant_enrollment(
    user,
    course: Course,
    *,
    order=None,
    source: str = Enrollment.Source.ORDER,
    started_at=None,
) -> Tuple[Enrollment, bool]:
    """
    Idempotently enroll ``user`` into ``course``.

    If the user is already enrolled nothing is written: no second row and no
    counter increment. A concurrent insert for the same pair is absorbed by
    the unique constraint (``get_or_create`` re-reads the winner's row).

    Args:
        user: User to enroll
        course: Course to grant
        order: Paying order, None for administrative grants
        source: ``Enrollment.Source`` value
        started_at: Grant timestamp (defaults to now)

    Returns:
        (enrollment, created)
    """
    defaults = {"order": order, "source": source, "status": Enrollment.Status.ACTIVE}
    if started_at is not None:
        defaults["started_at"] = started_at

    with transaction.atomic():
        enrollment, created = Enrollment.objects.get_or_create(
            user=user, course=course, defaults=defaults
        )
        if created:
            Course.objects.filter(pk=course.pk).update(students_count=F("students_count") + 1)

    if created:
        logger.info("Enrolled user %s into course %s (source=%s, order=%s).",
                    user.pk, course.pk, source, getattr(order, "pk", None))
    else:
        logger.info("Enrollment already exists for user %s and course %s.", user.pk, course.pk)
    return enrollment, created


def is_enrolled(user, course_id) -> bool:
    return Enrollment.objects.filter(user=user, course_id=course_id).exists()



def update_progress(enrollment: Enrollment, progress_percentage: int) -> Enrollment:
    """
    Store the learning progress of an enrollment.

    Reaching 100 completes the enrollment. A completed enrollment stays
    completed and keeps its first ``completed_at``.
    """
    enrollment.progress_percentage = progress_percentage
    update_fields = ["progress_percentage"]
    if progress_percentage >= 100 and enrollment.status != Enrollment.Status.COMPLETED:
        enrollment.status = Enrollment.Status.COMPLETED
        enrollment.completed_at = timezone.now()
        update_fields += ["status", "completed_at"]
        logger.info("User %s completed course %s.", enrollment.user_id, enrollment.course_id)
    enrollment.save(update_fields=update_fields)
    return enrollment
