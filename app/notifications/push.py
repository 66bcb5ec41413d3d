"""
Expo push gateway client.

Sends one notification to one Expo push token per request. The gateway
answers 200 with a push ticket:

    {"data": {"status": "ok", "id": "..."}}
    {"data": {"status": "error", "message": "...",
              "details": {"error": "DeviceNotRegistered"}}}

Transport problems, non-2xx responses and unreadable bodies raise
ExternalServiceError. A ticket with status "error" is returned, not raised;
the caller decides what to do with the token.

Usage:
    from notifications.push import ExpoPushClient

    client = ExpoPushClient.from_settings()
    ticket = client.send(token, "New message from Alice", "hi", {"type": "message"})
    if ticket.device_not_registered:
        ...deactivate the token...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests
from django.conf import settings

from core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

DEVICE_NOT_REGISTERED = "DeviceNotRegistered"


@dataclass(frozen=True)
class PushTicket:
    """Gateway verdict for a single push request."""

    status: str
    ticket_id: str | None = None
    message: str = ""
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def error_code(self) -> str | None:
        return self.details.get("error")

    @property
    def device_not_registered(self) -> bool:
        return self.error_code == DEVICE_NOT_REGISTERED


class ExpoPushClient:
    """Thin HTTP client for the Expo push API."""

    def __init__(self, url: str, timeout: float, access_token: str = ""):
        self.url = url
        self.timeout = timeout
        self.access_token = access_token

    @classmethod
    def from_settings(cls) -> ExpoPushClient:
        return cls(
            url=settings.EXPO_PUSH_URL,
            timeout=settings.EXPO_PUSH_TIMEOUT_SECONDS,
            access_token=settings.EXPO_ACCESS_TOKEN,
        )

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @staticmethod
    def build_payload(token: str, title: str, body: str, data: dict | None = None) -> dict:
        return {
            "to": token,
            "sound": "default",
            "title": title,
            "body": body,
            "data": data or {},
            "priority": "high",
            "channelId": "default",
        }

    def send(self, token: str, title: str, body: str, data: dict | None = None) -> PushTicket:
        """
        Push one notification to one device.

        Raises:
            ExternalServiceError: The gateway could not be reached or
                returned something other than a push ticket
        """
        try:
            response = requests.post(
                self.url,
                json=self.build_payload(token, title, body, data),
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceError(
                f"Push gateway request failed: {e}",
                error_code="PUSH_GATEWAY_UNREACHABLE",
            ) from e

        if not response.ok:
            raise ExternalServiceError(
                f"Push gateway returned HTTP {response.status_code}",
                error_code="PUSH_GATEWAY_ERROR",
                details={"status_code": response.status_code},
            )

        try:
            ticket = response.json()["data"]
            return PushTicket(
                status=ticket["status"],
                ticket_id=ticket.get("id"),
                message=ticket.get("message", ""),
                details=ticket.get("details") or {},
            )
        except (ValueError, KeyError, TypeError) as e:
            raise ExternalServiceError(
                "Push gateway returned an unreadable response",
                error_code="PUSH_GATEWAY_BAD_RESPONSE",
            ) from e
