"""
Celery tasks for notification delivery.

Tasks:
    send_message_notification: Push a "new message" notification to the
        receiver of a stored chat message

Design:
    - Queued by MessageService after the message transaction commits
    - Receives the message id (UUID string), never the message itself
    - Best effort: no retry; failures are logged and the task returns None

Usage:
    from notifications.tasks import send_message_notification

    send_message_notification.delay(str(message.id))
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.db import DatabaseError

from chat.constants import MESSAGE_CONFIG
from chat.models import Message
from notifications.models import NotificationCategory
from notifications.services import PushNotificationService

logger = logging.getLogger(__name__)


def build_preview(text: str) -> str:
    """Shorten message text for the notification body."""
    limit = MESSAGE_CONFIG.NOTIFICATION_PREVIEW_LENGTH
    if len(text) <= limit:
        return text
    return text[:limit] + MESSAGE_CONFIG.NOTIFICATION_PREVIEW_SUFFIX


@shared_task
def send_message_notification(message_id: str) -> dict | None:
    """
    Notify the receiver of a message on their registered devices.

    Flow:
        1. Load the message with sender and receiver
        2. Build title, preview body and data payload
        3. Fan out through PushNotificationService (category "messages")

    Args:
        message_id: UUID string of the stored Message

    Returns:
        NotificationOutcome as a dict, or None if the message is gone or
        the database failed
    """
    try:
        message = (
            Message.objects.select_related("sender", "receiver")
            .filter(id=message_id)
            .first()
        )
        if message is None:
            logger.warning(f"Message {message_id} not found, notification dropped")
            return None

        sender_name = message.sender.get_full_name()
        outcome = PushNotificationService.notify(
            receiver=message.receiver,
            category=NotificationCategory.MESSAGES,
            title=f"New message from {sender_name}",
            body=build_preview(message.text),
            data={
                "type": "message",
                "userId": str(message.sender_id),
                "messageId": str(message.id),
                "senderName": sender_name,
            },
        )
    except DatabaseError as e:
        logger.exception(f"Notification for message {message_id} failed: {e}")
        return None

    logger.info(f"Notification for message {message_id}: {outcome.as_dict()}")
    return outcome.as_dict()
