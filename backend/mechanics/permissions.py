from rest_framework.permissions import BasePermission


class IsMechanic(BasePermission):
    """
    Allows access only to users with role == 'mechanic'.
    """
    message = "Only mechanics allowed"

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and getattr(request.user, "role", None) == "mechanic"
        )
