"""
ASGI config for the messaging backend.

Serves:
- HTTP requests via Django (REST API, admin, docs)
- WebSocket connections via Django Channels (ws/chat/)

Uvicorn uses this entry point:

    uvicorn config.asgi:application --host 0.0.0.0 --port 8000

The message rate limiter is created here, once per process, and handed to
the chat consumer.

https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Initialize Django before importing anything that touches models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import build_websocket_urlpatterns  # noqa: E402
from chat.throttling import MessageRateLimiter  # noqa: E402

message_rate_limiter = MessageRateLimiter.from_settings()

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        # 1. AllowedHostsOriginValidator - origin must match ALLOWED_HOSTS
        # 2. JWTAuthMiddleware - resolves the user from the access token
        # 3. URLRouter - routes to the chat consumer
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(
                URLRouter(build_websocket_urlpatterns(message_rate_limiter))
            )
        ),
    }
)
