"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Message moderation
- Conversation context inspection
"""

from django.contrib import admin

from chat.models import ConversationContext, Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "sender",
        "receiver",
        "text_preview",
        "product_id",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "created_at"]
    search_fields = ["text", "pair_key", "sender__email", "receiver__email"]
    readonly_fields = ["pair_key", "created_at", "updated_at"]
    raw_id_fields = ["sender", "receiver"]
    ordering = ["-created_at"]

    @admin.display(description="Text")
    def text_preview(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text


@admin.register(ConversationContext)
class ConversationContextAdmin(admin.ModelAdmin):
    """Admin interface for ConversationContext model."""

    list_display = [
        "participants_hash",
        "product_id",
        "product_name",
        "updated_at",
    ]
    search_fields = ["participants_hash", "product_id", "product_name"]
    readonly_fields = ["participants_hash", "created_at", "updated_at"]
    raw_id_fields = ["participant_low", "participant_high"]
