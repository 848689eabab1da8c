"""
E-Learning Enrollment Serializers

Author: DSP Development Team
Version: 1.0.0
"""

from rest_framework import serializers

from .models import Enrollment


class EnrollmentSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = Enrollment
        fields = (
            "id",
            "course",
            "course_title",
            "order",
            "source",
            "status",
            "progress_percentage",
            "started_at",
            "completed_at",
            "certificate_url",
        )
        read_only_fields = fields


class AdminGrantSerializer(serializers.Serializer):
    """Body of the administrative direct grant: ``{"user_id": 3, "course_id": 7}``."""

    user_id = serializers.IntegerField(min_value=1)
    course_id = serializers.IntegerField(min_value=1)


class ProgressUpdateSerializer(serializers.Serializer):
    progress_percentage = serializers.IntegerField(min_value=0, max_value=100)
