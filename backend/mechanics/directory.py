"""Query interface over mechanic profiles, keyed by the owning user's id."""

from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, FloatField, Value
from django.db.models.functions import Power

from mechanics.models import MechanicProfile
from services.request_management.exceptions import MechanicProfileNotFoundError


class MechanicDirectory:
    model = MechanicProfile

    def get_profile(self, user_id, for_update=False) -> MechanicProfile:
        queryset = self.model.objects.select_related('user')
        if for_update:
            queryset = queryset.select_for_update(of=('self',))
        try:
            return queryset.get(user_id=user_id)
        except self.model.DoesNotExist:
            raise MechanicProfileNotFoundError()

    def find_eligible(self):
        """Profiles that may be offered work: available, verified, active owner, located."""
        return self.model.objects.select_related('user').filter(
            is_available=True,
            is_verified=True,
            user__is_active=True,
            current_latitude__isnull=False,
            current_longitude__isnull=False,
        )

    def find_eligible_near(self, latitude, longitude):
        """
        Eligible profiles ranked by the planar (dlat)^2 + (dlng)^2 in degrees,
        closest first, ties by profile id. Ordering happens in the database so
        callers can slice for a LIMIT.
        """
        proximity = ExpressionWrapper(
            Power(F('current_latitude') - _degrees(latitude), 2)
            + Power(F('current_longitude') - _degrees(longitude), 2),
            output_field=FloatField(),
        )
        return self.find_eligible().annotate(proximity=proximity).order_by('proximity', 'id')

    @staticmethod
    def can_accept(profile: MechanicProfile) -> bool:
        # Location is optional here: it only feeds the arrival estimate
        return bool(profile.is_available and profile.is_verified and profile.user.is_active)

    def increment_total_jobs(self, user_id):
        updated = self.model.objects.filter(user_id=user_id).update(total_jobs=F('total_jobs') + 1)
        if updated == 0:
            raise MechanicProfileNotFoundError()


def _degrees(value):
    return Value(Decimal(str(value)), output_field=DecimalField())
