import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID v4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("text", models.TextField(help_text="Message body")),
                (
                    "product_id",
                    models.CharField(
                        blank=True,
                        help_text="Marketplace item this message refers to",
                        max_length=64,
                        null=True,
                    ),
                ),
                (
                    "product_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Item name at the time of sending",
                        max_length=255,
                    ),
                ),
                (
                    "pair_key",
                    models.CharField(
                        editable=False,
                        help_text="Canonical key of the sender/receiver pair",
                        max_length=100,
                    ),
                ),
                (
                    "is_read",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the receiver has read this message",
                    ),
                ),
                (
                    "receiver",
                    models.ForeignKey(
                        help_text="User this message is addressed to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="received_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["pair_key", "created_at", "id"],
                        name="chat_msg_pair_cursor_idx",
                    ),
                    models.Index(
                        fields=["receiver", "sender", "is_read"],
                        name="chat_msg_unread_idx",
                    ),
                    models.Index(
                        fields=["sender", "-created_at"],
                        name="chat_msg_sender_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ConversationContext",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID v4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "participants_hash",
                    models.CharField(
                        help_text="Canonical key of the participant pair",
                        max_length=100,
                        unique=True,
                    ),
                ),
                (
                    "product_id",
                    models.CharField(
                        blank=True,
                        help_text="Marketplace item under discussion",
                        max_length=64,
                        null=True,
                    ),
                ),
                ("product_name", models.CharField(blank=True, default="", max_length=255)),
                ("product_image", models.CharField(blank=True, default="", max_length=500)),
                (
                    "participant_high",
                    models.ForeignKey(
                        help_text="Participant whose id sorts second",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "participant_low",
                    models.ForeignKey(
                        help_text="Participant whose id sorts first",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_conversation_context",
                "ordering": ["-updated_at"],
            },
        ),
    ]
