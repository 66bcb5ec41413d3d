"""
Message flood control.

- SendMessageThrottle: DRF throttle for POST /chat/send/ (cache backed,
  rate from REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]["chat_send"])
- MessageRateLimiter: sliding-window limiter for realtime private messages

MessageRateLimiter holds its state on the instance. config.asgi creates one
per process and hands it to the chat consumer; tests build their own and
call reset() between cases.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable

from django.conf import settings
from rest_framework.throttling import UserRateThrottle


class SendMessageThrottle(UserRateThrottle):
    scope = "chat_send"


class MessageRateLimiter:
    """
    Per-user sliding window: at most ``max_messages`` in ``window_seconds``.

    Confined to one event loop; consumers call it without awaiting, so no
    locking is needed.

    Usage:
        limiter = MessageRateLimiter(max_messages=30, window_seconds=60)
        if not limiter.allow(user.id):
            ...reject...
    """

    def __init__(
        self,
        max_messages: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self.max_messages = max_messages
        self.window_seconds = window_seconds
        self._clock = clock
        self._events: dict[str, deque[float]] = defaultdict(deque)

    @classmethod
    def from_settings(cls) -> MessageRateLimiter:
        return cls(
            max_messages=settings.CHAT_MESSAGE_RATE_LIMIT,
            window_seconds=settings.CHAT_MESSAGE_RATE_WINDOW_SECONDS,
        )

    def _prune(self, key: str, now: float) -> deque[float]:
        events = self._events.get(key)
        if events is None:
            return deque()
        while events and now - events[0] >= self.window_seconds:
            events.popleft()
        if not events:
            del self._events[key]
        return events

    def allow(self, user_id) -> bool:
        """Record an attempt; False when the user is over the limit."""
        key = str(user_id)
        now = self._clock()
        if len(self._prune(key, now)) >= self.max_messages:
            return False
        self._events[key].append(now)
        return True

    def release(self, user_id) -> None:
        """Give back the user's latest attempt, for sends that were never stored."""
        events = self._events.get(str(user_id))
        if events:
            events.pop()
            if not events:
                del self._events[str(user_id)]

    def retry_after(self, user_id) -> float:
        """Seconds until the user's oldest counted attempt leaves the window."""
        key = str(user_id)
        now = self._clock()
        events = self._prune(key, now)
        if len(events) < self.max_messages:
            return 0.0
        return max(0.0, self.window_seconds - (now - events[0]))

    def tracked_users(self) -> int:
        return len(self._events)

    def reset(self, user_id=None) -> None:
        if user_id is None:
            self._events.clear()
        else:
            self._events.pop(str(user_id), None)
