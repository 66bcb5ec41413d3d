"""
Serializers for chat API.

Read serializers render snake_case fields. Write serializers accept the
camelCase keys the mobile client sends (receiverId, productId, ...) and map
them onto snake_case attributes through ``source``.

Serializer Hierarchy:
    ProductReferenceSerializer: Optional product block
    MessageSerializer: Stored message
    ConversationContextSerializer: Pair context
    ConversationSummarySerializer: Conversation list entry
    SendMessageSerializer: POST /chat/send/ body
    UpsertContextSerializer: POST /chat/context/ body
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.constants import MESSAGE_CONFIG, PRODUCT_CONFIG
from chat.models import ConversationContext, Message
from chat.values import ProductReference


class ProductReferenceSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(allow_blank=True)
    image = serializers.CharField(allow_blank=True)


def _product_data(product: ProductReference | None) -> dict | None:
    if product is None:
        return None
    return ProductReferenceSerializer(product).data


class MessageSerializer(serializers.ModelSerializer):
    """A stored message; ``product`` is null when none was referenced."""

    sender_id = serializers.UUIDField(read_only=True)
    receiver_id = serializers.UUIDField(read_only=True)
    product = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "receiver_id",
            "text",
            "product",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields

    def get_product(self, obj: Message) -> dict | None:
        return _product_data(obj.product)


class ConversationContextSerializer(serializers.ModelSerializer):
    participants = serializers.SerializerMethodField()
    product = serializers.SerializerMethodField()

    class Meta:
        model = ConversationContext
        fields = ["participants_hash", "participants", "product", "updated_at"]
        read_only_fields = fields

    def get_participants(self, obj: ConversationContext) -> list[str]:
        return [str(obj.participant_low_id), str(obj.participant_high_id)]

    def get_product(self, obj: ConversationContext) -> dict | None:
        return _product_data(obj.product)


class ConversationSummarySerializer(serializers.Serializer):
    counterpart = UserSummarySerializer()
    last_message = MessageSerializer()
    message_count = serializers.IntegerField()
    unread_count = serializers.IntegerField()
    context = ConversationContextSerializer(allow_null=True)


class SendMessageSerializer(serializers.Serializer):
    """Body of POST /chat/send/."""

    receiverId = serializers.UUIDField(source="receiver_id")
    text = serializers.CharField(max_length=MESSAGE_CONFIG.MAX_TEXT_LENGTH)
    productId = serializers.CharField(
        source="product_id",
        max_length=PRODUCT_CONFIG.MAX_ID_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
    )
    productName = serializers.CharField(
        source="product_name",
        max_length=PRODUCT_CONFIG.MAX_NAME_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
    )

    def get_product(self) -> ProductReference | None:
        data = self.validated_data
        return ProductReference.from_fields(
            data.get("product_id"), data.get("product_name")
        )


class UpsertContextSerializer(serializers.Serializer):
    """Body of POST /chat/context/. Omitting productId clears the product."""

    targetUserId = serializers.UUIDField(source="target_user_id")
    productId = serializers.CharField(
        source="product_id",
        max_length=PRODUCT_CONFIG.MAX_ID_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
    )
    productName = serializers.CharField(
        source="product_name",
        max_length=PRODUCT_CONFIG.MAX_NAME_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
    )
    productImage = serializers.CharField(
        source="product_image",
        max_length=PRODUCT_CONFIG.MAX_IMAGE_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
    )

    def get_product(self) -> ProductReference | None:
        data = self.validated_data
        return ProductReference.from_fields(
            data.get("product_id"),
            data.get("product_name"),
            data.get("product_image"),
        )
