"""
Pagination classes for chat API.

Threads can grow without bound, so they are always served one cursor page
at a time. Cursors encode (created_at, id), so concurrent inserts never
shift or duplicate rows between pages.
"""

from rest_framework.pagination import CursorPagination

from chat.constants import MESSAGE_CONFIG


class MessageCursorPagination(CursorPagination):
    """
    Cursor pagination for a thread, oldest first.

    Default: 50 messages per page
    Maximum: 100 messages per page

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of messages (optional override)
    """

    page_size = MESSAGE_CONFIG.THREAD_PAGE_SIZE
    max_page_size = MESSAGE_CONFIG.THREAD_MAX_PAGE_SIZE
    page_size_query_param = "page_size"
    ordering = ("created_at", "id")
    cursor_query_param = "cursor"
