"""
JWT WebSocket Authentication Middleware for Django Channels.

Browsers cannot set an Authorization header on a websocket handshake, so the
access token is read from the `token` query-string parameter, falling back to
an `Authorization: Bearer <token>` header for non-browser clients.
"""

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


def _token_from_scope(scope):
    query = parse_qs(scope.get("query_string", b"").decode("utf-8"))
    if query.get("token"):
        return query["token"][0]

    headers = dict(scope.get("headers", []))
    auth_header = headers.get(b"authorization", b"").decode("utf-8")
    parts = auth_header.split()
    if len(parts) == 2 and parts[0] in jwt_settings.AUTH_HEADER_TYPES:
        return parts[1]
    return None


@database_sync_to_async
def _get_active_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id, is_active=True)
    except User.DoesNotExist:
        logger.warning(f"User {user_id} from JWT not found or inactive")
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Puts the user named by a valid access token into `scope["user"]`.

    Connections without a valid token get AnonymousUser; consumers decide
    whether to reject them.
    """

    async def __call__(self, scope, receive, send):
        if scope["type"] == "websocket":
            scope["user"] = await self.get_user_from_jwt(scope)
        return await super().__call__(scope, receive, send)

    async def get_user_from_jwt(self, scope):
        raw_token = _token_from_scope(scope)
        if not raw_token:
            logger.debug("No JWT access token found in WebSocket handshake")
            return AnonymousUser()

        try:
            token = AccessToken(raw_token)
        except TokenError as e:
            logger.warning(f"Invalid JWT token in WebSocket connection: {e}")
            return AnonymousUser()

        user_id = token.get(jwt_settings.USER_ID_CLAIM)
        if user_id is None:
            logger.warning("JWT payload missing user id claim")
            return AnonymousUser()

        return await _get_active_user(user_id)
