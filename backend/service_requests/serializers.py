from decimal import Decimal

from rest_framework import serializers

from accounts.serializers import UserSerializer
from services.request_management.exceptions import RequestValidationError
from .models import ServiceRequest

COORDINATE_QUANTUM = Decimal("0.00000001")


class ServiceRequestSerializer(serializers.ModelSerializer):
    """Flat request representation; also the payload of pushed events."""
    requester_id = serializers.IntegerField(read_only=True)
    mechanic_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ServiceRequest
        fields = [
            'id', 'requester_id', 'mechanic_id', 'issue_type', 'description',
            'latitude', 'longitude', 'address', 'status', 'estimated_arrival',
            'created_at', 'accepted_at', 'started_at', 'completed_at',
            'cancelled_at', 'version',
        ]
        read_only_fields = fields


class ServiceRequestDetailSerializer(ServiceRequestSerializer):
    """Adds the requester and the assigned mechanic with their last position."""
    requester = UserSerializer(read_only=True)
    mechanic = UserSerializer(read_only=True, allow_null=True)
    mechanic_location = serializers.SerializerMethodField()

    class Meta(ServiceRequestSerializer.Meta):
        fields = ServiceRequestSerializer.Meta.fields + ['requester', 'mechanic', 'mechanic_location']
        read_only_fields = fields

    def get_mechanic_location(self, obj):
        if obj.mechanic_id is None:
            return None
        profile = getattr(obj.mechanic, 'mechanic_profile', None)
        if profile is None or not profile.has_location:
            return None
        updated_at = profile.location_updated_at
        return {
            'latitude': str(profile.current_latitude),
            'longitude': str(profile.current_longitude),
            'updated_at': serializers.DateTimeField().to_representation(updated_at) if updated_at else None,
        }


class CoordinatesSerializer(serializers.Serializer):
    """
    Latitude/longitude pair in degrees.

    Any precision is accepted and rounded to the 8 decimal places stored.
    """
    latitude = serializers.DecimalField(
        max_digits=None, decimal_places=None,
        min_value=Decimal("-90"), max_value=Decimal("90"),
    )
    longitude = serializers.DecimalField(
        max_digits=None, decimal_places=None,
        min_value=Decimal("-180"), max_value=Decimal("180"),
    )

    def validate_latitude(self, value):
        return value.quantize(COORDINATE_QUANTUM)

    def validate_longitude(self, value):
        return value.quantize(COORDINATE_QUANTUM)


class CreateServiceRequestSerializer(CoordinatesSerializer):
    issue_type = serializers.ChoiceField(choices=ServiceRequest.ISSUE_TYPE_CHOICES)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class NearbyMechanicsQuerySerializer(CoordinatesSerializer):
    radius_km = serializers.FloatField(required=False, min_value=0.1)


class MatchCandidateSerializer(serializers.Serializer):
    """Renders a ``services.matching.MatchCandidate``."""
    mechanic_id = serializers.IntegerField()
    username = serializers.CharField(source='profile.user.username')
    specializations = serializers.ListField(source='profile.specializations', child=serializers.CharField())
    rating = serializers.DecimalField(source='profile.rating', max_digits=3, decimal_places=2)
    latitude = serializers.DecimalField(source='profile.current_latitude', max_digits=10, decimal_places=8)
    longitude = serializers.DecimalField(source='profile.current_longitude', max_digits=11, decimal_places=8)
    distance_km = serializers.FloatField()
    eta_minutes = serializers.IntegerField()


def validate_payload(serializer_class, data):
    """
    Run ``serializer_class`` over ``data`` and return the cleaned values.

    Raises:
        RequestValidationError: with every failing field, before any domain call.
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise RequestValidationError(serializer.errors)
    return serializer.validated_data


def validate_create_payload(data):
    return validate_payload(CreateServiceRequestSerializer, data)
