from django.db import models
from django.db.models import Q
from django.conf import settings


class ServiceRequest(models.Model):
    """A breakdown reported by a requester, tracked until a mechanic completes it."""

    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (IN_PROGRESS, 'In progress'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    ACTIVE_STATUSES = (PENDING, ACCEPTED, IN_PROGRESS)
    TERMINAL_STATUSES = (COMPLETED, CANCELLED)
    # Statuses in which a mechanic must be assigned
    ASSIGNED_STATUSES = (ACCEPTED, IN_PROGRESS, COMPLETED)
    # Statuses in which the mechanic is on the job
    WORKING_STATUSES = (ACCEPTED, IN_PROGRESS)

    ISSUE_TYPE_CHOICES = [
        ('FLAT_TIRE', 'Flat tire'),
        ('ENGINE_FAILURE', 'Engine failure'),
        ('BATTERY_DEAD', 'Dead battery'),
        ('OUT_OF_FUEL', 'Out of fuel'),
        ('LOCKED_OUT', 'Locked out'),
        ('ACCIDENT', 'Accident'),
        ('OTHER', 'Other'),
    ]

    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='service_requests'
    )

    mechanic = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assigned_service_requests'
    )

    issue_type = models.CharField(max_length=20, choices=ISSUE_TYPE_CHOICES)
    description = models.TextField(max_length=1000, blank=True)

    # Breakdown location
    latitude = models.DecimalField(max_digits=10, decimal_places=8)
    longitude = models.DecimalField(max_digits=11, decimal_places=8)
    address = models.CharField(max_length=500, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    estimated_arrival = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Bumped by every conditional transition
    version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'service_requests'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['requester'],
                condition=Q(status__in=['PENDING', 'ACCEPTED', 'IN_PROGRESS']),
                name='one_active_request_per_requester',
            ),
            models.CheckConstraint(
                condition=(
                    Q(mechanic__isnull=True, status__in=['PENDING', 'CANCELLED'])
                    | Q(mechanic__isnull=False, status__in=['ACCEPTED', 'IN_PROGRESS', 'COMPLETED'])
                ),
                name='mechanic_assigned_iff_working',
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'created_at'], name='service_req_status_idx'),
        ]

    def __str__(self):
        return f"Request #{self.id} - {self.issue_type} - {self.status}"

    @property
    def is_active(self):
        return self.status in self.ACTIVE_STATUSES
