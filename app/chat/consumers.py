"""
WebSocket consumer for direct messaging.

One socket per client. After connecting, a client joins the room of each
counterpart it is chatting with; rooms are named from the canonical pair
key, so both participants land in the same channel group.

Authentication:
    JWTAuthMiddleware puts the user in scope["user"]. Anonymous sockets are
    closed with code 4001. Payload identity fields (userId, fromUserId) are
    only checked against the authenticated user, never trusted.

Message Types (from client):
    - join-chat {userId?, targetUserId}
    - private-message {fromUserId?, toUserId, message, timestamp?, productId?, productName?}
    - typing {userId?, targetUserId, isTyping}

Message Types (to client):
    - joined-chat {room}
    - new-message {_id, fromUserId, toUserId, message, timestamp, senderName, read, productId, productName}
    - message-sent {_id, timestamp, message, toUserId}
    - message-error {message}
    - user-typing {userId, isTyping, timestamp}

Delivery is broadcast-only: a counterpart that is not connected misses the
event and sees the message next time it lists the thread. The push
notification is queued by MessageService once the message is stored.
"""

from __future__ import annotations

import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.utils import timezone

from chat.constants import CLOSE_CODES, REALTIME_EVENTS, SEND_FAILED_MESSAGE
from chat.pairing import room_group_name, room_key
from chat.services import MessageService
from chat.throttling import MessageRateLimiter
from chat.values import ProductReference
from core.exceptions import PermissionDeniedError, PersistenceError

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    Realtime transport for direct messages and typing indicators.

    Attributes:
        rate_limiter: Shared per-process MessageRateLimiter, or None to disable
        joined_rooms: Channel groups this socket has joined
    """

    rate_limiter: MessageRateLimiter | None = None

    def __init__(self, *args, rate_limiter: MessageRateLimiter | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.rate_limiter = rate_limiter
        self.joined_rooms: set[str] = set()
        self.user = None

    async def connect(self):
        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning("Rejected unauthenticated chat connection")
            await self.close(code=CLOSE_CODES.UNAUTHENTICATED)
            return

        self.user = user
        if "jwt" in self.scope.get("subprotocols", []):
            await self.accept(subprotocol="jwt")
        else:
            await self.accept()
        logger.info(f"User {user.id} connected to chat")

    async def disconnect(self, close_code):
        for group in self.joined_rooms:
            await self.channel_layer.group_discard(group, self.channel_name)
        self.joined_rooms.clear()

        if self.user is not None:
            logger.info(f"User {self.user.id} disconnected from chat ({close_code})")

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            await self._send_error("Invalid payload")
            return

        event_type = content.get("type")

        try:
            if event_type == REALTIME_EVENTS.JOIN_CHAT:
                await self._handle_join(content)
            elif event_type == REALTIME_EVENTS.PRIVATE_MESSAGE:
                await self._handle_private_message(content)
            elif event_type == REALTIME_EVENTS.TYPING:
                await self._handle_typing(content)
            else:
                await self._send_error(f"Unknown event type: {event_type}")
        except PermissionDeniedError as e:
            await self._send_error(e.message)

    # -------------------------------------------------------------------------
    # Client events
    # -------------------------------------------------------------------------

    async def _handle_join(self, content):
        self._ensure_identity(content, "userId")

        target_id = self._parse_id(content.get("targetUserId"))
        if target_id is None:
            await self._send_error("Invalid target user")
            return

        await self._join_room(target_id)
        await self.send_json(
            {
                "type": REALTIME_EVENTS.JOINED_CHAT,
                "room": room_key(self.user.id, target_id),
            }
        )

    async def _handle_private_message(self, content):
        self._ensure_identity(content, "fromUserId")

        receiver_id = self._parse_id(content.get("toUserId"))
        if receiver_id is None:
            await self._send_error("Invalid recipient")
            return

        if self.rate_limiter is not None and not self.rate_limiter.allow(self.user.id):
            retry_after = self.rate_limiter.retry_after(self.user.id)
            logger.info(f"Rate limited messages from user {self.user.id}")
            await self._send_error(
                f"Too many messages. Try again in {int(retry_after) + 1} seconds"
            )
            return

        product = ProductReference.from_fields(
            content.get("productId"), content.get("productName")
        )

        try:
            result = await self._store_message(receiver_id, content.get("message"), product)
        except PersistenceError:
            self._release_quota()
            await self._send_error(SEND_FAILED_MESSAGE)
            return

        if not result.success:
            self._release_quota()
            await self._send_error(result.error)
            return

        message = result.data
        group = await self._join_room(receiver_id)
        timestamp = message.created_at.isoformat()

        await self.channel_layer.group_send(
            group,
            {
                "type": "chat.message",
                "sender_channel_name": self.channel_name,
                "message": {
                    "_id": str(message.id),
                    "fromUserId": str(message.sender_id),
                    "toUserId": str(message.receiver_id),
                    "message": message.text,
                    "timestamp": timestamp,
                    "senderName": self.user.get_full_name(),
                    "read": message.is_read,
                    "productId": message.product_id,
                    "productName": message.product_name,
                },
            },
        )

        await self.send_json(
            {
                "type": REALTIME_EVENTS.MESSAGE_SENT,
                "_id": str(message.id),
                "timestamp": timestamp,
                "message": message.text,
                "toUserId": str(message.receiver_id),
            }
        )

    async def _handle_typing(self, content):
        self._ensure_identity(content, "userId")

        target_id = self._parse_id(content.get("targetUserId"))
        if target_id is None:
            await self._send_error("Invalid target user")
            return

        await self.channel_layer.group_send(
            room_group_name(self.user.id, target_id),
            {
                "type": "chat.typing",
                "sender_channel_name": self.channel_name,
                "user_id": str(self.user.id),
                "is_typing": bool(content.get("isTyping", False)),
                "timestamp": timezone.now().isoformat(),
            },
        )

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def chat_message(self, event):
        """Relay a stored message to every room member except the sender's socket."""
        if event["sender_channel_name"] == self.channel_name:
            return

        await self.send_json({"type": REALTIME_EVENTS.NEW_MESSAGE, **event["message"]})

    async def chat_typing(self, event):
        if event["sender_channel_name"] == self.channel_name:
            return

        await self.send_json(
            {
                "type": REALTIME_EVENTS.USER_TYPING,
                "userId": event["user_id"],
                "isTyping": event["is_typing"],
                "timestamp": event["timestamp"],
            }
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _join_room(self, counterpart_id) -> str:
        group = room_group_name(self.user.id, counterpart_id)
        if group not in self.joined_rooms:
            await self.channel_layer.group_add(group, self.channel_name)
            self.joined_rooms.add(group)
            logger.debug(f"User {self.user.id} joined room {group}")
        return group

    def _ensure_identity(self, content, field: str) -> None:
        claimed = content.get(field)
        if claimed is not None and str(claimed) != str(self.user.id):
            logger.warning(
                f"User {self.user.id} sent {field}={claimed} for another identity"
            )
            raise PermissionDeniedError(
                "Cannot act on behalf of another user",
                error_code="IDENTITY_MISMATCH",
            )

    def _release_quota(self) -> None:
        if self.rate_limiter is not None:
            self.rate_limiter.release(self.user.id)

    @staticmethod
    def _parse_id(value) -> uuid.UUID | None:
        try:
            return uuid.UUID(str(value))
        except (TypeError, ValueError):
            return None

    async def _send_error(self, message: str):
        await self.send_json({"type": REALTIME_EVENTS.MESSAGE_ERROR, "message": message})

    @database_sync_to_async
    def _store_message(self, receiver_id, text, product):
        return MessageService.send_message(
            sender=self.user,
            receiver_id=receiver_id,
            text=text,
            product=product,
        )
