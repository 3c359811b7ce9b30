from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from mechanics import services
from mechanics.permissions import IsMechanic
from mechanics.serializers import (
    AvailabilitySerializer,
    MechanicProfileSerializer,
    UpdateMechanicProfileSerializer,
)
from service_requests.serializers import CoordinatesSerializer, ServiceRequestSerializer, validate_payload
from services.registry import get_services


def require_mechanic_profile(user):
    """The caller's profile; MechanicProfileNotFoundError (404) when missing."""
    return get_services().directory.get_profile(user.id)


class MechanicProfileView(APIView):
    permission_classes = [IsAuthenticated, IsMechanic]

    def get(self, request):
        profile = require_mechanic_profile(request.user)
        return Response(MechanicProfileSerializer(profile).data)

    def put(self, request):
        profile = require_mechanic_profile(request.user)
        data = validate_payload(UpdateMechanicProfileSerializer, request.data)
        services.update_profile(
            profile,
            specializations=data.get("specializations"),
            is_available=data.get("is_available"),
        )
        return Response(MechanicProfileSerializer(profile).data)


class MechanicAvailabilityView(APIView):
    permission_classes = [IsAuthenticated, IsMechanic]

    def put(self, request):
        profile = require_mechanic_profile(request.user)
        data = validate_payload(AvailabilitySerializer, request.data)
        services.set_availability(profile, data["is_available"])
        return Response({
            "message": "Availability updated",
            "is_available": profile.is_available,
        })


# ws/mechanic/ ``location_update`` messages run the same update
class MechanicLocationView(APIView):
    permission_classes = [IsAuthenticated, IsMechanic]

    def get(self, request):
        profile = require_mechanic_profile(request.user)
        return Response({
            "latitude": str(profile.current_latitude) if profile.has_location else None,
            "longitude": str(profile.current_longitude) if profile.has_location else None,
            "last_updated": profile.location_updated_at,
        })

    def put(self, request):
        profile = require_mechanic_profile(request.user)
        data = validate_payload(CoordinatesSerializer, request.data)

        services.update_location(profile, data["latitude"], data["longitude"])

        return Response({
            "message": "Location updated",
            "latitude": str(profile.current_latitude),
            "longitude": str(profile.current_longitude),
            "last_updated": profile.location_updated_at,
        })


class PendingRequestsView(APIView):
    """
    GET: unclaimed PENDING requests, oldest first.
    """
    permission_classes = [IsAuthenticated, IsMechanic]

    def get(self, request):
        pending = get_services().store.find_pending_unassigned()
        return Response(ServiceRequestSerializer(pending, many=True).data)


class MechanicRequestsView(APIView):
    """
    GET: every request assigned to the caller, newest first.
    """
    permission_classes = [IsAuthenticated, IsMechanic]

    def get(self, request):
        assigned = get_services().store.find_by_mechanic(request.user.id)
        return Response(ServiceRequestSerializer(assigned, many=True).data)


class MechanicActiveRequestsView(APIView):
    """
    GET: the caller's ACCEPTED / IN_PROGRESS requests.
    """
    permission_classes = [IsAuthenticated, IsMechanic]

    def get(self, request):
        active = get_services().store.find_active_by_mechanic(request.user.id)
        return Response(ServiceRequestSerializer(active, many=True).data)


class RequestTransitionView(APIView):
    """
    PUT: accept | reject | start | complete on one request.
    ``transition`` is bound per URL pattern.
    """
    permission_classes = [IsAuthenticated, IsMechanic]
    transition = None

    def put(self, request, request_id: int):
        container = get_services()
        if self.transition == "accept":
            # Eligibility and arrival estimate live in the dispatcher
            updated = container.dispatch.accept(request_id, request.user.id)
        else:
            updated = getattr(container.lifecycle, self.transition)(request_id, request.user.id)
        return Response(ServiceRequestSerializer(updated).data)
