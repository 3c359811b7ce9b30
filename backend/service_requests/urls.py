# service_requests/urls.py

from django.urls import path

from .views import (
    ServiceRequestListCreateView,
    ActiveServiceRequestView,
    ServiceRequestDetailView,
    CancelServiceRequestView,
    CandidateMechanicsView,
    NearbyMechanicsView,
)

app_name = "service_requests"

urlpatterns = [
    path("", ServiceRequestListCreateView.as_view(), name="list-create"),
    path("active/", ActiveServiceRequestView.as_view(), name="active"),
    path("nearby-mechanics/", NearbyMechanicsView.as_view(), name="nearby-mechanics"),
    path("<int:request_id>/", ServiceRequestDetailView.as_view(), name="detail"),
    path("<int:request_id>/cancel/", CancelServiceRequestView.as_view(), name="cancel"),
    path("<int:request_id>/candidates/", CandidateMechanicsView.as_view(), name="candidates"),
]
