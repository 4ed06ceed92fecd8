import logging
from urllib.parse import parse_qs
from channels.middleware import BaseMiddleware
from django.db import close_old_connections

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Resolves ``?token=<access token>`` on websocket connections to a user.
    """

    async def __call__(self, scope, receive, send):
        # models are not importable until the app registry is ready
        from django.contrib.auth.models import AnonymousUser
        from django.contrib.auth import get_user_model
        from rest_framework_simplejwt.exceptions import TokenError
        from rest_framework_simplejwt.tokens import AccessToken

        User = get_user_model()
        close_old_connections()

        token = parse_qs(scope.get("query_string", b"").decode()).get("token")
        scope["user"] = AnonymousUser()

        if token:
            try:
                access_token = AccessToken(token[0])
                user = await User.objects.aget(id=access_token["user_id"])
                if user.is_active:
                    scope["user"] = user
            except (TokenError, User.DoesNotExist) as e:
                logger.warning("Websocket JWT rejected: %s", e)

        return await super().__call__(scope, receive, send)
