"""
E-Learning Enrollment Views

Endpoints
---------
1. MyEnrollmentsView
   - URL: /api/elearning/enrollments/
   - GET: enrollments of the current user

2. EnrollmentProgressView
   - URL: /api/elearning/enrollments/<course_id>/progress/
   - GET: own enrollment of the course, 404 when not enrolled
   - PUT ``{"progress_percentage": 40}``, 0..100. At 100 the enrollment is
     completed.

3. AdminGrantView
   - URL: /api/elearning/admin/grant/
   - POST ``{"user_id": 3, "course_id": 7}``, staff only
   - 201 when the enrollment was created, 200 when it already existed.
     A later payment for the same course then skips the enrollment.

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..courses.models import Course
from .models import Enrollment
from .serializers import AdminGrantSerializer, EnrollmentSerializer, ProgressUpdateSerializer
from .services import grant_enrollment, update_progress

logger = logging.getLogger(__name__)


class MyEnrollmentsView(generics.ListAPIView):
    serializer_class = EnrollmentSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return Enrollment.objects.filter(user=self.request.user).select_related("course")


class EnrollmentProgressView(APIView):
    permission_classes = [IsAuthenticated]

    def _own_enrollment(self, request, course_id):
        return get_object_or_404(
            Enrollment.objects.select_related("course"), user=request.user, course_id=course_id
        )

    def get(self, request, course_id):
        return Response(EnrollmentSerializer(self._own_enrollment(request, course_id)).data)

    def put(self, request, course_id):
        body = ProgressUpdateSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        enrollment = update_progress(
            self._own_enrollment(request, course_id), body.validated_data["progress_percentage"]
        )
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_200_OK)


class AdminGrantView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request):
        body = AdminGrantSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        user = get_object_or_404(get_user_model(), pk=body.validated_data["user_id"])
        course = get_object_or_404(Course, pk=body.validated_data["course_id"])

        enrollment, created = grant_enrollment(user, course, source=Enrollment.Source.ADMIN_GRANT)
        logger.info(
            "Admin %s granted course %s to user %s (created=%s).",
            request.user.pk, course.pk, user.pk, created,
        )
        return Response(
            {"enrollment": EnrollmentSerializer(enrollment).data, "created": created},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
