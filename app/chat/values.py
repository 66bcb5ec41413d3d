"""
Value objects shared by the chat store, API and realtime channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chat.constants import PRODUCT_CONFIG

if TYPE_CHECKING:
    from authentication.models import User
    from chat.models import ConversationContext, Message


@dataclass(frozen=True)
class ProductReference:
    """
    Marketplace item a message or conversation is about.

    A conversation either has a product reference or it does not; there is
    no half-populated state. ``from_fields`` returns None when no product id
    is given.
    """

    id: str
    name: str = ""
    image: str = ""

    @classmethod
    def from_fields(
        cls,
        product_id: str | None,
        name: str | None = None,
        image: str | None = None,
    ) -> ProductReference | None:
        if product_id is None or str(product_id).strip() == "":
            return None
        return cls(
            id=str(product_id),
            name=str(name) if name else "",
            image=str(image) if image else "",
        )

    def length_errors(self) -> dict[str, list[str]]:
        """Field errors for values longer than their stored columns."""
        limits = {
            "product_id": (self.id, PRODUCT_CONFIG.MAX_ID_LENGTH),
            "product_name": (self.name, PRODUCT_CONFIG.MAX_NAME_LENGTH),
            "product_image": (self.image, PRODUCT_CONFIG.MAX_IMAGE_LENGTH),
        }
        return {
            field_name: [f"Ensure this value has at most {limit} characters."]
            for field_name, (value, limit) in limits.items()
            if len(value) > limit
        }


@dataclass
class ConversationSummary:
    """One entry of a user's conversation list."""

    counterpart: User
    last_message: Message
    message_count: int
    unread_count: int
    context: ConversationContext | None = None
