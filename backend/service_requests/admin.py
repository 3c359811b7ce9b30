from django.contrib import admin

from .models import ServiceRequest


@admin.register(ServiceRequest)
class ServiceRequestAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "requester",
        "mechanic",
        "issue_type",
        "status",
        "created_at",
        "accepted_at",
        "completed_at",
    ]
    list_filter = ["status", "issue_type", "created_at"]
    search_fields = ["requester__username", "mechanic__username", "address"]
    raw_id_fields = ["requester"]
    # Lifecycle fields only change through the state machine
    readonly_fields = [
        "status",
        "mechanic",
        "accepted_at",
        "started_at",
        "completed_at",
        "cancelled_at",
        "estimated_arrival",
        "version",
        "created_at",
        "updated_at",
    ]
