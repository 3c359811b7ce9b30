from django.urls import path
from .views import (
    MechanicProfileView,
    MechanicAvailabilityView,
    MechanicLocationView,
    PendingRequestsView,
    MechanicRequestsView,
    MechanicActiveRequestsView,
    RequestTransitionView,
)

urlpatterns = [
    path("profile/", MechanicProfileView.as_view(), name="mechanic-profile"),
    path("availability/", MechanicAvailabilityView.as_view(), name="mechanic-availability"),
    path("location/", MechanicLocationView.as_view(), name="mechanic-location"),
    path("requests/", MechanicRequestsView.as_view(), name="mechanic-requests"),
    path("requests/pending/", PendingRequestsView.as_view(), name="mechanic-pending-requests"),
    path("requests/active/", MechanicActiveRequestsView.as_view(), name="mechanic-active-requests"),
]

urlpatterns += [
    path(f"requests/<int:request_id>/{transition}/", RequestTransitionView.as_view(transition=transition),
         name=f"mechanic-request-{transition}")
    for transition in ("accept", "reject", "start", "complete")
]
