"""
Chat system service layer.

Services:
    MessageService: Direct messages (send, thread listing, read state,
        thread deletion, conversation summaries)
    ConversationContextService: Per-pair product context (upsert, lookup)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Database failures raise PersistenceError
    - Push notification fan-out is scheduled only after the message commit,
      and its failures never reach the sender

Usage:
    from chat.services import MessageService

    result = MessageService.send_message(
        sender=alice,
        receiver_id=bob.id,
        text="Is the jacket still available?",
        product=ProductReference(id="p42", name="Denim jacket"),
    )
    if result.success:
        message = result.data
"""

from __future__ import annotations

import uuid
from functools import partial
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Count, F, Max, OuterRef, Q, Subquery
from kombu.exceptions import OperationalError

from chat.constants import MESSAGE_CONFIG
from chat.models import ConversationContext, Message
from chat.pairing import canonical_pair_key
from chat.values import ConversationSummary, ProductReference
from core.exceptions import PersistenceError
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def _parse_user_id(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _validate_product(product: ProductReference | None) -> ServiceResult | None:
    if product is None:
        return None
    errors = product.length_errors()
    if not errors:
        return None
    return ServiceResult.failure(
        "Product reference is too long",
        error_code="PRODUCT_TOO_LONG",
        errors=errors,
    )


class MessageService(BaseService):
    """
    Service for direct message operations.

    Methods:
        resolve_user: Look up an active counterpart by id
        send_message: Persist a message and schedule its push notification
        list_thread: All messages between two users, oldest first
        mark_thread_read: Flip unread messages from a counterpart to read
        delete_thread: Remove every message between two users
        list_conversations: One summary per counterpart, newest first
    """

    @classmethod
    def resolve_user(cls, user_id) -> ServiceResult[User]:
        """
        Look up an active user by id.

        Error codes:
            USER_NOT_FOUND: Id is malformed or no active user has it
        """
        parsed = _parse_user_id(user_id)
        user = None
        if parsed is not None:
            user = get_user_model().objects.filter(id=parsed, is_active=True).first()

        if user is None:
            return ServiceResult.failure(
                "User not found",
                error_code="USER_NOT_FOUND",
            )
        return ServiceResult.success(user)

    @classmethod
    def send_message(
        cls,
        sender: User,
        receiver_id,
        text: str | None,
        product: ProductReference | None = None,
    ) -> ServiceResult[Message]:
        """
        Append a message from sender to receiver.

        The message is stored unread with a server timestamp. Once the
        transaction commits, the receiver's push notification is queued;
        queueing problems are logged and do not affect the result.

        Args:
            sender: Authenticated user sending the message
            receiver_id: Id of the receiving user
            text: Message body
            product: Optional marketplace item the message refers to

        Returns:
            ServiceResult with the new Message

        Error codes:
            MISSING_RECEIVER: No receiver id given
            EMPTY_TEXT: Text missing or only whitespace
            TEXT_TOO_LONG: Text exceeds MESSAGE_CONFIG.MAX_TEXT_LENGTH
            PRODUCT_TOO_LONG: A product field exceeds its PRODUCT_CONFIG limit
            RECEIVER_NOT_FOUND: Receiver id does not resolve to an active user

        Raises:
            PersistenceError: The database rejected the write
        """
        if text is not None and not isinstance(text, str):
            text = str(text)

        missing = cls.validate_required(receiver_id=receiver_id, text=text)
        if missing is not None:
            if "receiver_id" in missing.errors:
                return ServiceResult.failure(
                    "Receiver is required",
                    error_code="MISSING_RECEIVER",
                    errors=missing.errors,
                )
            return ServiceResult.failure(
                "Message text cannot be empty",
                error_code="EMPTY_TEXT",
                errors=missing.errors,
            )

        text = text.strip()
        if len(text) > MESSAGE_CONFIG.MAX_TEXT_LENGTH:
            return ServiceResult.failure(
                f"Message text cannot exceed {MESSAGE_CONFIG.MAX_TEXT_LENGTH} characters",
                error_code="TEXT_TOO_LONG",
            )

        invalid_product = _validate_product(product)
        if invalid_product is not None:
            return invalid_product

        receiver_result = cls.resolve_user(receiver_id)
        if not receiver_result:
            return ServiceResult.failure(
                "Receiver not found",
                error_code="RECEIVER_NOT_FOUND",
            )
        receiver = receiver_result.data

        try:
            with cls.atomic():
                message = Message.objects.create(
                    sender=sender,
                    receiver=receiver,
                    text=text,
                    product_id=product.id if product else None,
                    product_name=product.name if product else "",
                )
                transaction.on_commit(partial(cls._queue_notification, message.id))
        except DatabaseError as e:
            cls.get_logger().error(
                f"Failed to store message from {sender.id} to {receiver.id}: {e}"
            )
            raise PersistenceError("Failed to send message") from e

        cls.get_logger().info(
            f"User {sender.id} sent message {message.id} to {receiver.id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def _queue_notification(cls, message_id) -> None:
        from notifications.tasks import send_message_notification

        try:
            send_message_notification.delay(str(message_id))
        except OperationalError as e:
            cls.get_logger().exception(
                f"Could not queue notification for message {message_id}: {e}"
            )

    @classmethod
    def list_thread(cls, user: User, counterpart) -> QuerySet[Message]:
        """
        All messages exchanged by two users, oldest first.

        Returns a queryset so callers paginate it instead of loading the
        whole history.
        """
        return (
            Message.objects.filter(pair_key=canonical_pair_key(user, counterpart))
            .select_related("sender", "receiver")
            .order_by("created_at", "id")
        )

    @classmethod
    def mark_thread_read(cls, reader: User, counterpart) -> int:
        """
        Mark every unread message from counterpart to reader as read.

        Idempotent: a second call changes nothing and returns 0.

        Returns:
            Number of messages flipped to read
        """
        try:
            updated = Message.objects.filter(
                sender=counterpart,
                receiver=reader,
                is_read=False,
            ).update(is_read=True)
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to mark thread read for {reader.id}: {e}")
            raise PersistenceError("Failed to mark messages as read") from e

        cls.get_logger().debug(
            f"User {reader.id} marked {updated} messages from {counterpart.pk} as read"
        )
        return updated

    @classmethod
    def delete_thread(cls, user: User, counterpart) -> int:
        """
        Delete every message between user and counterpart, both directions.

        The pair's conversation context is left in place.

        Returns:
            Number of messages deleted
        """
        try:
            deleted, _ = Message.objects.filter(
                pair_key=canonical_pair_key(user, counterpart)
            ).delete()
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to delete thread for {user.id}: {e}")
            raise PersistenceError("Failed to delete conversation") from e

        cls.get_logger().info(
            f"User {user.id} deleted {deleted} messages with {counterpart.pk}"
        )
        return deleted

    @classmethod
    def list_conversations(cls, user: User) -> list[ConversationSummary]:
        """
        Summaries of every conversation the user takes part in.

        Each summary carries the counterpart, the latest message, the total
        message count, the number of messages addressed to the user that
        are still unread, and the pair's context if one exists. Ordered by
        latest message time, newest first.
        """
        rows = list(
            Message.objects.filter(Q(sender=user) | Q(receiver=user))
            .values("pair_key")
            .annotate(
                message_count=Count("id"),
                unread_count=Count("id", filter=Q(receiver=user, is_read=False)),
                last_message_at=Max("created_at"),
            )
            .order_by("-last_message_at", "pair_key")
        )
        if not rows:
            return []

        keys = [row["pair_key"] for row in rows]

        latest_id = (
            Message.objects.filter(pair_key=OuterRef("pair_key"))
            .order_by("-created_at", "-id")
            .values("id")[:1]
        )
        last_messages = {
            message.pair_key: message
            for message in Message.objects.filter(pair_key__in=keys)
            .annotate(latest_id=Subquery(latest_id))
            .filter(id=F("latest_id"))
            .select_related("sender", "receiver")
        }
        contexts = {
            context.participants_hash: context
            for context in ConversationContext.objects.filter(
                participants_hash__in=keys
            )
        }

        summaries = []
        for row in rows:
            last_message = last_messages[row["pair_key"]]
            counterpart = (
                last_message.receiver
                if last_message.sender_id == user.id
                else last_message.sender
            )
            summaries.append(
                ConversationSummary(
                    counterpart=counterpart,
                    last_message=last_message,
                    message_count=row["message_count"],
                    unread_count=row["unread_count"],
                    context=contexts.get(row["pair_key"]),
                )
            )
        return summaries


class ConversationContextService(BaseService):
    """
    Service for the per-pair conversation context.

    Methods:
        upsert_context: Create or replace the pair's product context
        get_context: Look up the pair's context
    """

    @classmethod
    def upsert_context(
        cls,
        user: User,
        counterpart: User,
        product: ProductReference | None = None,
    ) -> ServiceResult[ConversationContext]:
        """
        Create or replace the context for a user pair.

        Keyed on the canonical pair key, so the same row is found whichever
        participant writes. The unique key collapses concurrent first
        writers onto one row; content is last write wins. Passing no
        product clears the product fields.

        Error codes:
            PRODUCT_TOO_LONG: A product field exceeds its PRODUCT_CONFIG limit

        Raises:
            PersistenceError: The database rejected the write
        """
        invalid_product = _validate_product(product)
        if invalid_product is not None:
            return invalid_product

        low, high = sorted((user, counterpart), key=lambda u: str(u.pk))
        key = canonical_pair_key(user, counterpart)

        try:
            context, created = ConversationContext.objects.update_or_create(
                participants_hash=key,
                defaults={
                    "participant_low": low,
                    "participant_high": high,
                    "product_id": product.id if product else None,
                    "product_name": product.name if product else "",
                    "product_image": product.image if product else "",
                },
            )
        except DatabaseError as e:
            cls.get_logger().error(f"Failed to upsert context {key}: {e}")
            raise PersistenceError("Failed to update conversation context") from e

        action = "Created" if created else "Updated"
        cls.get_logger().info(
            f"{action} context {key} (product={context.product_id})"
        )
        return ServiceResult.success(context)

    @classmethod
    def get_context(cls, user: User, counterpart) -> ConversationContext | None:
        return (
            ConversationContext.objects.filter(
                participants_hash=canonical_pair_key(user, counterpart)
            )
            .select_related("participant_low", "participant_high")
            .first()
        )
