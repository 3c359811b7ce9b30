from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL


class MechanicProfile(models.Model):
    """Mechanic-specific details, availability and last known position"""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='mechanic_profile')

    # Skills, e.g. ["FLAT_TIRE", "BATTERY_DEAD"]
    specializations = models.JSONField(default=list, blank=True)

    is_available = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)

    # Location
    current_latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    current_longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)
    location_updated_at = models.DateTimeField(null=True, blank=True)

    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    total_jobs = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mechanic_profiles'
        indexes = [
            models.Index(fields=['is_available', 'is_verified'], name='mechanic_eligibility_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} (mechanic)"

    @property
    def has_location(self):
        return self.current_latitude is not None and self.current_longitude is not None
