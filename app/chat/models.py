"""
Chat system models.

Direct (1:1) messaging between marketplace users, and the side-record of
which item a pair of users is talking about.

Models:
    Message: One text message from a sender to a receiver
    ConversationContext: Current product topic of a user pair (one row per pair)

Design Decisions:
    - A thread is not a stored entity; it is every message sharing a
      canonical pair key (see chat.pairing)
    - Messages are immutable except for the read flag
    - Threads are deleted in bulk per pair; the context record survives
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from chat.constants import PRODUCT_CONFIG
from chat.pairing import canonical_pair_key
from chat.values import ProductReference
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

PAIR_KEY_MAX_LENGTH = 100


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A direct message between two users.

    Fields:
        sender: User who wrote the message
        receiver: User the message is addressed to
        text: Message body, never empty
        product_id / product_name: Optional marketplace item reference
        pair_key: Canonical key of (sender, receiver), set on first save
        is_read: Flipped to True when the receiver marks the thread read
        created_at: Server-assigned send time (from BaseModel)
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
        help_text="User this message is addressed to",
    )
    text = models.TextField(help_text="Message body")

    product_id = models.CharField(
        max_length=PRODUCT_CONFIG.MAX_ID_LENGTH,
        null=True,
        blank=True,
        help_text="Marketplace item this message refers to",
    )
    product_name = models.CharField(
        max_length=PRODUCT_CONFIG.MAX_NAME_LENGTH,
        blank=True,
        default="",
        help_text="Item name at the time of sending",
    )

    pair_key = models.CharField(
        max_length=PAIR_KEY_MAX_LENGTH,
        editable=False,
        help_text="Canonical key of the sender/receiver pair",
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Whether the receiver has read this message",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Thread listing and cursor pagination
            models.Index(
                fields=["pair_key", "created_at", "id"],
                name="chat_msg_pair_cursor_idx",
            ),
            # Mark-read and unread counts
            models.Index(
                fields=["receiver", "sender", "is_read"],
                name="chat_msg_unread_idx",
            ),
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"{self.sender_id} -> {self.receiver_id}: {preview}"

    def save(self, *args, **kwargs):
        if not self.pair_key:
            self.pair_key = canonical_pair_key(self.sender_id, self.receiver_id)
        super().save(*args, **kwargs)

    @property
    def product(self) -> ProductReference | None:
        return ProductReference.from_fields(self.product_id, self.product_name)


class ConversationContext(UUIDPrimaryKeyMixin, BaseModel):
    """
    What a pair of users is currently talking about.

    At most one row exists per unordered pair, enforced by the unique
    ``participants_hash``. Every upsert replaces the product fields
    wholesale (last write wins).

    Fields:
        participants_hash: Canonical pair key, unique
        participant_low / participant_high: The pair in canonical order
        product_id / product_name / product_image: Current item, all cleared
            when the pair stops referring to a product
        updated_at: Time of the last upsert (from BaseModel)
    """

    participants_hash = models.CharField(
        max_length=PAIR_KEY_MAX_LENGTH,
        unique=True,
        help_text="Canonical key of the participant pair",
    )
    participant_low = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="Participant whose id sorts first",
    )
    participant_high = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="Participant whose id sorts second",
    )

    product_id = models.CharField(
        max_length=PRODUCT_CONFIG.MAX_ID_LENGTH,
        null=True,
        blank=True,
        help_text="Marketplace item under discussion",
    )
    product_name = models.CharField(
        max_length=PRODUCT_CONFIG.MAX_NAME_LENGTH, blank=True, default=""
    )
    product_image = models.CharField(
        max_length=PRODUCT_CONFIG.MAX_IMAGE_LENGTH, blank=True, default=""
    )

    class Meta:
        db_table = "chat_conversation_context"
        ordering = ["-updated_at"]

    def __str__(self) -> str:
        return f"Context({self.participants_hash}, product={self.product_id})"

    @property
    def product(self) -> ProductReference | None:
        return ProductReference.from_fields(
            self.product_id, self.product_name, self.product_image
        )
