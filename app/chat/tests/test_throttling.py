"""
Tests for MessageRateLimiter.

A fake clock drives the window so the tests never sleep.
"""

import uuid

import pytest

from chat.throttling import MessageRateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return MessageRateLimiter(max_messages=3, window_seconds=60, clock=clock)


class TestMessageRateLimiter:
    def test_allows_up_to_limit(self, limiter):
        assert [limiter.allow("u1") for _ in range(3)] == [True, True, True]

    def test_rejects_over_limit(self, limiter):
        for _ in range(3):
            limiter.allow("u1")

        assert limiter.allow("u1") is False

    def test_users_counted_separately(self, limiter):
        for _ in range(3):
            limiter.allow("u1")

        assert limiter.allow("u2") is True

    def test_window_slides(self, limiter, clock):
        """
        Why it matters: a user who hit the limit must be able to send again
        once their oldest message leaves the window.
        """
        limiter.allow("u1")
        clock.advance(30)
        limiter.allow("u1")
        limiter.allow("u1")
        assert limiter.allow("u1") is False

        clock.advance(30)

        assert limiter.allow("u1") is True
        assert limiter.allow("u1") is False

    def test_rejected_attempts_not_counted(self, limiter, clock):
        for _ in range(3):
            limiter.allow("u1")
        for _ in range(5):
            limiter.allow("u1")

        clock.advance(60)

        assert limiter.allow("u1") is True

    def test_retry_after(self, limiter, clock):
        assert limiter.retry_after("u1") == 0.0

        for _ in range(3):
            limiter.allow("u1")
        clock.advance(20)

        assert limiter.retry_after("u1") == pytest.approx(40)

    def test_accepts_uuid_and_string_ids_alike(self, limiter):
        user_id = uuid.uuid4()
        for _ in range(3):
            limiter.allow(user_id)

        assert limiter.allow(str(user_id)) is False

    def test_reset_single_user(self, limiter):
        for _ in range(3):
            limiter.allow("u1")
            limiter.allow("u2")

        limiter.reset("u1")

        assert limiter.allow("u1") is True
        assert limiter.allow("u2") is False

    def test_reset_all(self, limiter):
        for _ in range(3):
            limiter.allow("u1")
            limiter.allow("u2")

        limiter.reset()

        assert limiter.allow("u1") is True
        assert limiter.allow("u2") is True

    def test_release_returns_latest_attempt(self, limiter):
        for _ in range(3):
            limiter.allow("u1")

        limiter.release("u1")

        assert limiter.allow("u1") is True
        assert limiter.allow("u1") is False

    def test_release_without_attempts_is_noop(self, limiter):
        limiter.release("u1")

        assert limiter.tracked_users() == 0

    def test_idle_users_dropped_after_window(self, limiter, clock):
        limiter.allow("u1")
        limiter.allow("u2")
        clock.advance(61)

        limiter.allow("u2")
        limiter.retry_after("u1")

        assert limiter.tracked_users() == 1

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            MessageRateLimiter(max_messages=0, window_seconds=60)

    def test_from_settings(self, settings):
        settings.CHAT_MESSAGE_RATE_LIMIT = 5
        settings.CHAT_MESSAGE_RATE_WINDOW_SECONDS = 10

        limiter = MessageRateLimiter.from_settings()

        assert limiter.max_messages == 5
        assert limiter.window_seconds == 10
