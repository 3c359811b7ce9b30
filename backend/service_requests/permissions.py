from rest_framework.permissions import BasePermission


class IsRequester(BasePermission):
    """
    Allows access only to users with role == 'user' (requester).
    """
    message = "Only requesters allowed"

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and getattr(request.user, "role", None) == "user"
        )
