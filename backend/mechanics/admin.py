from django.contrib import admin
from mechanics.models import MechanicProfile


@admin.register(MechanicProfile)
class MechanicProfileAdmin(admin.ModelAdmin):
    """Admin panel for verifying and inspecting mechanics"""

    list_display = [
        "user",
        "is_verified",
        "is_available",
        "rating",
        "total_jobs",
        "current_latitude",
        "current_longitude",
        "location_updated_at",
    ]

    list_filter = [
        "is_verified",
        "is_available",
    ]

    search_fields = [
        "user__username",
        "user__email",
    ]

    readonly_fields = [
        "total_jobs",
        "location_updated_at",
    ]

    ordering = ("user__username",)
