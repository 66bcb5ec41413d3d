"""
URL configuration for chat API.

URL Structure:
    /send/                          POST
    /conversations/list/            GET
    /conversations/{user_id}/       DELETE
    /mark-read/{user_id}/           PUT
    /context/                       POST
    /context/{user_id}/             GET
    /{user_id}/                     GET

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import path

from chat.views import (
    ContextDetailView,
    ContextUpsertView,
    ConversationListView,
    DeleteThreadView,
    MarkReadView,
    SendMessageView,
    ThreadView,
)

app_name = "chat"

urlpatterns = [
    path("send/", SendMessageView.as_view(), name="send"),
    path("conversations/list/", ConversationListView.as_view(), name="conversation-list"),
    path(
        "conversations/<uuid:user_id>/",
        DeleteThreadView.as_view(),
        name="conversation-delete",
    ),
    path("mark-read/<uuid:user_id>/", MarkReadView.as_view(), name="mark-read"),
    path("context/", ContextUpsertView.as_view(), name="context-upsert"),
    path("context/<uuid:user_id>/", ContextDetailView.as_view(), name="context-detail"),
    path("<uuid:user_id>/", ThreadView.as_view(), name="thread"),
]
