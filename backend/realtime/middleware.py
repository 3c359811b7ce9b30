"""WebSocket authentication middleware for JWT and session-based auth."""

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


@database_sync_to_async
def _get_active_user(user_id):
    User = get_user_model()
    return User.objects.filter(id=user_id, is_active=True).first()


class JWTOrSessionAuthMiddleware(BaseMiddleware):
    """
    Authenticate WebSocket connections using either:
    1. JWT access token in querystring (?token=...)
    2. Session cookie, resolved by AuthMiddlewareStack upstream
    """

    async def __call__(self, scope, receive, send):
        query_string = scope.get("query_string", b"").decode()
        params = parse_qs(query_string)

        # 1) JWT from query params (mobile)
        token_list = params.get("token")
        if token_list:
            try:
                access = AccessToken(token_list[0])
                user = await _get_active_user(access["user_id"])
            except (TokenError, KeyError) as e:
                logger.debug("JWT auth failed: %s", e)
                user = None
            scope["user"] = user or AnonymousUser()
            return await super().__call__(scope, receive, send)

        # 2) Session fallback (browser)
        scope["user"] = scope.get("user") or AnonymousUser()
        return await super().__call__(scope, receive, send)
