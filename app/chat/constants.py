"""
Constants and configuration for the chat module.

Import example:
    from chat.constants import MESSAGE_CONFIG, REALTIME_EVENTS
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_TEXT_LENGTH: Final[int] = 5000  # Characters

    # Thread pagination (cursor based, oldest first)
    THREAD_PAGE_SIZE: Final[int] = 50
    THREAD_MAX_PAGE_SIZE: Final[int] = 100

    # Push notification preview
    NOTIFICATION_PREVIEW_LENGTH: Final[int] = 50
    NOTIFICATION_PREVIEW_SUFFIX: Final[str] = "..."


class PRODUCT_CONFIG:
    """Column limits for the optional product reference."""

    MAX_ID_LENGTH: Final[int] = 64
    MAX_NAME_LENGTH: Final[int] = 255
    MAX_IMAGE_LENGTH: Final[int] = 500


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_EVENTS:
    """Event names on the chat WebSocket."""

    # Client -> server
    JOIN_CHAT: Final[str] = "join-chat"
    PRIVATE_MESSAGE: Final[str] = "private-message"
    TYPING: Final[str] = "typing"

    # Server -> client
    JOINED_CHAT: Final[str] = "joined-chat"
    NEW_MESSAGE: Final[str] = "new-message"
    MESSAGE_SENT: Final[str] = "message-sent"
    MESSAGE_ERROR: Final[str] = "message-error"
    USER_TYPING: Final[str] = "user-typing"


class CLOSE_CODES:
    """WebSocket close codes used by the chat consumer."""

    UNAUTHENTICATED: Final[int] = 4001


# Generic text sent to clients when the store fails
SEND_FAILED_MESSAGE: Final[str] = "Failed to send message"
