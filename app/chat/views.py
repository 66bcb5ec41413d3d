"""
API views for direct messaging.

URL Structure:
    /api/v1/chat/{user_id}/                    GET     Thread with a user (cursor paginated)
    /api/v1/chat/send/                         POST    Append a message
    /api/v1/chat/conversations/list/           GET     Conversation summaries
    /api/v1/chat/conversations/{user_id}/      DELETE  Delete the thread with a user
    /api/v1/chat/mark-read/{user_id}/          PUT     Mark the thread read
    /api/v1/chat/context/                      POST    Upsert conversation context
    /api/v1/chat/context/{user_id}/            GET     Conversation context

Design Decisions:
    - The acting identity is always request.user; user ids in the path or
      body name the counterpart
    - Business rules live in chat.services; views translate ServiceResult
      failures into 400/404 responses
    - PersistenceError propagates to core.exception_handlers (503)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.pagination import MessageCursorPagination
from chat.serializers import (
    ConversationContextSerializer,
    ConversationSummarySerializer,
    MessageSerializer,
    SendMessageSerializer,
    UpsertContextSerializer,
)
from chat.services import ConversationContextService, MessageService
from chat.throttling import SendMessageThrottle
from core.services import ServiceResult

NOT_FOUND_CODES = frozenset(
    {"USER_NOT_FOUND", "RECEIVER_NOT_FOUND", "CONTEXT_NOT_FOUND"}
)


def failure_response(result) -> Response:
    status_code = (
        status.HTTP_404_NOT_FOUND
        if result.error_code in NOT_FOUND_CODES
        else status.HTTP_400_BAD_REQUEST
    )
    body = {"error": result.error, "error_code": result.error_code}
    if result.errors:
        body["errors"] = result.errors
    return Response(body, status=status_code)


class ThreadView(APIView):
    """
    GET /api/v1/chat/{user_id}/

    Messages between the caller and user_id, oldest first, one cursor page
    at a time. The pair's context is attached to every page.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = MessageCursorPagination

    @extend_schema(
        operation_id="chat_thread",
        summary="List thread",
        description=(
            "Messages exchanged with a user, oldest first, cursor paginated "
            "(50 per page, page_size up to 100). The conversation context, if "
            "any, is returned alongside."
        ),
        responses={
            200: OpenApiResponse(
                response=MessageSerializer(many=True),
                description="One page of the thread plus the context",
            ),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat"],
    )
    def get(self, request, user_id):
        counterpart_result = MessageService.resolve_user(user_id)
        if not counterpart_result:
            return failure_response(counterpart_result)
        counterpart = counterpart_result.data

        paginator = self.pagination_class()
        queryset = MessageService.list_thread(request.user, counterpart)
        page = paginator.paginate_queryset(queryset, request, view=self)

        response = paginator.get_paginated_response(
            MessageSerializer(page, many=True).data
        )
        context = ConversationContextService.get_context(request.user, counterpart)
        response.data["context"] = (
            ConversationContextSerializer(context).data if context else None
        )
        return response


class SendMessageView(APIView):
    """
    POST /api/v1/chat/send/

    Payload:
        receiverId: Receiving user's id
        text: Message body
        productId / productName: Optional item the message refers to
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [SendMessageThrottle]

    @extend_schema(
        operation_id="chat_send",
        summary="Send message",
        description=(
            "Store a message for the receiver. A push notification is queued "
            "after the message is saved; notification problems never fail "
            "this request."
        ),
        request=SendMessageSerializer,
        responses={
            201: OpenApiResponse(response=MessageSerializer, description="Message stored"),
            400: OpenApiResponse(description="Missing receiver or empty text"),
            404: OpenApiResponse(description="Receiver not found"),
        },
        tags=["Chat"],
    )
    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            sender=request.user,
            receiver_id=serializer.validated_data["receiver_id"],
            text=serializer.validated_data["text"],
            product=serializer.get_product(),
        )
        if not result.success:
            return failure_response(result)

        return Response(
            MessageSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class ConversationListView(APIView):
    """GET /api/v1/chat/conversations/list/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_conversations",
        summary="List conversations",
        description=(
            "One entry per counterpart with the latest message, message count, "
            "unread count and context, newest conversation first."
        ),
        responses={200: ConversationSummarySerializer(many=True)},
        tags=["Chat"],
    )
    def get(self, request):
        summaries = MessageService.list_conversations(request.user)
        return Response(ConversationSummarySerializer(summaries, many=True).data)


class DeleteThreadView(APIView):
    """DELETE /api/v1/chat/conversations/{user_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_delete_thread",
        summary="Delete conversation",
        description=(
            "Delete every message between the caller and the user, in both "
            "directions. The conversation context is kept."
        ),
        responses={
            200: OpenApiResponse(description="{'deleted_count': int}"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat"],
    )
    def delete(self, request, user_id):
        counterpart_result = MessageService.resolve_user(user_id)
        if not counterpart_result:
            return failure_response(counterpart_result)

        deleted = MessageService.delete_thread(request.user, counterpart_result.data)
        return Response({"deleted_count": deleted})


class MarkReadView(APIView):
    """PUT /api/v1/chat/mark-read/{user_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_mark_read",
        summary="Mark thread read",
        description="Mark every unread message from the user to the caller as read.",
        request=None,
        responses={
            200: OpenApiResponse(description="{'updated_count': int}"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat"],
    )
    def put(self, request, user_id):
        counterpart_result = MessageService.resolve_user(user_id)
        if not counterpart_result:
            return failure_response(counterpart_result)

        updated = MessageService.mark_thread_read(request.user, counterpart_result.data)
        return Response({"updated_count": updated})


class ContextUpsertView(APIView):
    """
    POST /api/v1/chat/context/

    Payload:
        targetUserId: Counterpart id
        productId / productName / productImage: Current item (omit to clear)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_context_upsert",
        summary="Set conversation context",
        description=(
            "Create or replace the product the caller and the target user are "
            "talking about. One record exists per pair; the last write wins."
        ),
        request=UpsertContextSerializer,
        responses={
            200: ConversationContextSerializer,
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat"],
    )
    def post(self, request):
        serializer = UpsertContextSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        counterpart_result = MessageService.resolve_user(
            serializer.validated_data["target_user_id"]
        )
        if not counterpart_result:
            return failure_response(counterpart_result)

        result = ConversationContextService.upsert_context(
            request.user,
            counterpart_result.data,
            product=serializer.get_product(),
        )
        if not result.success:
            return failure_response(result)

        return Response(ConversationContextSerializer(result.data).data)


class ContextDetailView(APIView):
    """GET /api/v1/chat/context/{user_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_context_detail",
        summary="Get conversation context",
        responses={
            200: ConversationContextSerializer,
            404: OpenApiResponse(description="User or context not found"),
        },
        tags=["Chat"],
    )
    def get(self, request, user_id):
        counterpart_result = MessageService.resolve_user(user_id)
        if not counterpart_result:
            return failure_response(counterpart_result)

        context = ConversationContextService.get_context(
            request.user, counterpart_result.data
        )
        if context is None:
            return failure_response(
                ServiceResult.failure(
                    "No context for this conversation",
                    error_code="CONTEXT_NOT_FOUND",
                )
            )
        return Response(ConversationContextSerializer(context).data)
