"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - One socket per client; rooms are joined with join-chat events

Authentication:
    JWT access token as ``?token=<jwt>`` or the ``jwt, <token>`` subprotocol
    (see chat.middleware).
"""

from __future__ import annotations

from django.urls import path

from chat.consumers import ChatConsumer
from chat.throttling import MessageRateLimiter


def build_websocket_urlpatterns(rate_limiter: MessageRateLimiter | None = None):
    """WebSocket routes with the given rate limiter wired into the consumer."""
    return [
        path("ws/chat/", ChatConsumer.as_asgi(rate_limiter=rate_limiter)),
    ]
