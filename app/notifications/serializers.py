"""
Serializers for notification API.

Serializer Hierarchy:
    DeviceTokenSerializer: Registered device (response)
    RegisterDeviceSerializer: POST /notifications/devices/ body
    UnregisterDeviceSerializer: DELETE /notifications/devices/ body
    PreferencesSerializer: Flat preference switches
    PreferencesResponseSerializer: GET /notifications/preferences/ response
    SendNotificationSerializer: POST /notifications/send/ body
    NotificationOutcomeSerializer: Fan-out result
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import DevicePlatform, DeviceToken, NotificationCategory


# ============================================================================
# Device Serializers
# ============================================================================


class DeviceTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceToken
        fields = ["id", "token", "platform", "is_active", "last_registered_at"]
        read_only_fields = fields


class RegisterDeviceSerializer(serializers.Serializer):
    """
    Body for registering a device.

    Fields:
        token: Expo push token
        platform: ios, android or web
    """

    token = serializers.CharField(max_length=255)
    platform = serializers.ChoiceField(choices=DevicePlatform.choices)


class UnregisterDeviceSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=255)


class DeviceRegistrationResponseSerializer(serializers.Serializer):
    device = DeviceTokenSerializer()
    token_count = serializers.IntegerField()


# ============================================================================
# Preference Serializers
# ============================================================================


class PreferencesSerializer(serializers.Serializer):
    """
    Notification switches.

    Used for both reading and partial updates: every field is optional on
    input and omitted fields are left unchanged.
    """

    enabled = serializers.BooleanField(required=False)
    messages = serializers.BooleanField(required=False)
    announcements = serializers.BooleanField(required=False)
    subscription = serializers.BooleanField(required=False)
    punishments = serializers.BooleanField(required=False)


class PreferencesResponseSerializer(serializers.Serializer):
    preferences = PreferencesSerializer()
    device_tokens_count = serializers.IntegerField()


# ============================================================================
# Send Serializers
# ============================================================================


class SendNotificationSerializer(serializers.Serializer):
    """
    Body for the staff send endpoint.

    Fields:
        userId: Receiving user's id
        type: Notification category
        title: Notification title
        body: Notification body
        data: Extra payload (optional)
    """

    userId = serializers.UUIDField(source="user_id")
    type = serializers.ChoiceField(
        source="category", choices=NotificationCategory.choices
    )
    title = serializers.CharField(max_length=255)
    body = serializers.CharField()
    data = serializers.DictField(required=False, default=dict)


class NotificationOutcomeSerializer(serializers.Serializer):
    success_count = serializers.IntegerField()
    failure_count = serializers.IntegerField()
    skipped_reason = serializers.CharField(allow_null=True)
