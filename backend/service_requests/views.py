# service_requests/views.py

from django.conf import settings
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from services.registry import get_services
from services.request_management.exceptions import RequestAccessDeniedError
from .permissions import IsRequester
from .serializers import (
    MatchCandidateSerializer,
    NearbyMechanicsQuerySerializer,
    ServiceRequestDetailSerializer,
    ServiceRequestSerializer,
    validate_create_payload,
    validate_payload,
)


class ServiceRequestListCreateView(APIView):
    """
    GET: the caller's requests, newest first.
    POST: open a new request.

    POST Body:
    {
        "issue_type": "FLAT_TIRE",
        "description": "Rear left tire",   // optional
        "latitude": 12.9716,
        "longitude": 77.5946,
        "address": "MG Road"               // optional
    }
    """
    permission_classes = [IsAuthenticated, IsRequester]

    def get(self, request):
        requests = get_services().store.find_by_requester(request.user.id)
        return Response(ServiceRequestSerializer(requests, many=True).data)

    def post(self, request):
        data = validate_create_payload(request.data)
        created = get_services().lifecycle.create(request.user.id, **data)
        return Response(ServiceRequestSerializer(created).data, status=201)


class ActiveServiceRequestView(APIView):
    """
    GET: the caller's active request; empty body when there is none.
    """
    permission_classes = [IsAuthenticated, IsRequester]

    def get(self, request):
        active = get_services().store.find_active_by_requester(request.user.id)
        if active is None:
            return Response(None)
        return Response(ServiceRequestDetailSerializer(active).data)


class ServiceRequestDetailView(APIView):
    """
    GET: one request, visible to its requester and its assigned mechanic.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, request_id: int):
        service_request = get_services().store.get(request_id)
        if request.user.id not in (service_request.requester_id, service_request.mechanic_id):
            raise RequestAccessDeniedError()
        return Response(ServiceRequestDetailSerializer(service_request).data)


class CancelServiceRequestView(APIView):
    """
    PUT: requester cancels their request.
    """
    permission_classes = [IsAuthenticated, IsRequester]

    def put(self, request, request_id: int):
        cancelled = get_services().lifecycle.cancel(request_id, request.user.id)
        return Response(ServiceRequestSerializer(cancelled).data)


class CandidateMechanicsView(APIView):
    """
    GET: nearest eligible mechanics for one of the caller's requests.
    Optional ``?limit=`` (default from settings).
    """
    permission_classes = [IsAuthenticated, IsRequester]

    def get(self, request, request_id: int):
        services = get_services()
        service_request = services.store.get(request_id)
        if service_request.requester_id != request.user.id:
            raise RequestAccessDeniedError()

        limit = request.query_params.get("limit")
        limit = int(limit) if limit and limit.isdigit() else None

        candidates = services.dispatch.candidate_pool(request_id, limit)
        return Response({
            "request_id": service_request.id,
            "count": len(candidates),
            "candidates": MatchCandidateSerializer(candidates, many=True).data,
        })


class NearbyMechanicsView(APIView):
    """
    GET: eligible mechanics within ``radius_km`` of a point.

    Query: ?latitude=12.97&longitude=77.59&radius_km=10
    """
    permission_classes = [IsAuthenticated, IsRequester]

    def get(self, request):
        params = validate_payload(NearbyMechanicsQuerySerializer, request.query_params)
        radius_km = min(
            params.get("radius_km", settings.ROADSIDE_DEFAULT_SEARCH_RADIUS_KM),
            settings.ROADSIDE_MAX_SEARCH_RADIUS_KM,
        )

        candidates = get_services().match_engine.mechanics_within_radius(
            params["latitude"], params["longitude"], radius_km
        )
        return Response({
            "radius_km": radius_km,
            "count": len(candidates),
            "mechanics": MatchCandidateSerializer(candidates, many=True).data,
        })
