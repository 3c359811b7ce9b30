from rest_framework import serializers

from accounts.serializers import UserSerializer
from mechanics.models import MechanicProfile
from service_requests.models import ServiceRequest


class MechanicProfileSerializer(serializers.ModelSerializer):
    """
    Full mechanic profile serializer
    """
    user = UserSerializer(read_only=True)

    class Meta:
        model = MechanicProfile
        fields = [
            "id",
            "user",
            "specializations",
            "is_available",
            "is_verified",
            "current_latitude",
            "current_longitude",
            "location_updated_at",
            "rating",
            "total_jobs",
        ]
        read_only_fields = fields


class UpdateMechanicProfileSerializer(serializers.Serializer):
    specializations = serializers.ListField(
        child=serializers.ChoiceField(choices=ServiceRequest.ISSUE_TYPE_CHOICES),
        required=False,
    )
    is_available = serializers.BooleanField(required=False)


class AvailabilitySerializer(serializers.Serializer):
    """
    Serializer for toggling whether the mechanic takes new jobs.
    """
    is_available = serializers.BooleanField()
