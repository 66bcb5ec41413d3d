"""
Notification system models.

This module defines the models behind push notification fan-out:
- DeviceToken: Expo push tokens registered by a user's devices
- UserGlobalPreference: Master on/off switch per user
- UserCategoryPreference: Per-category on/off switch per user

Design Decisions:
    - Missing preference rows mean "enabled" (no row is created until a
      user changes something)
    - Preference hierarchy: Global -> Category
    - Device tokens are deactivated, not deleted, when the gateway reports
      them as unregistered
    - The same token may be registered by the same user on different
      platforms; (user, token, platform) is unique

Usage:
    from notifications.models import DeviceToken, NotificationCategory

    DeviceToken.objects.create(
        user=user,
        token="ExponentPushToken[xxxxxxxx]",
        platform=DevicePlatform.IOS,
    )
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


# =============================================================================
# Enums
# =============================================================================


class NotificationCategory(models.TextChoices):
    """
    Categories a notification can belong to.

    Each category can be switched off by the user independently.
    """

    MESSAGES = "messages", "Messages"
    ANNOUNCEMENTS = "announcements", "Announcements"
    SUBSCRIPTION = "subscription", "Subscription"
    PUNISHMENTS = "punishments", "Punishments"


class DevicePlatform(models.TextChoices):
    IOS = "ios", "iOS"
    ANDROID = "android", "Android"
    WEB = "web", "Web"


class SkipReason(models.TextChoices):
    """Standardized reasons for a notification that was not attempted."""

    GLOBAL_DISABLED = "global_disabled", "Global notifications disabled"
    CATEGORY_DISABLED = "category_disabled", "Category disabled"
    NO_DEVICE_TOKEN = "no_device_token", "No device token"


# =============================================================================
# Device Tokens
# =============================================================================


class DeviceTokenQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def for_user(self, user):
        return self.filter(user=user)


class DeviceToken(UUIDPrimaryKeyMixin, BaseModel):
    """
    An Expo push token registered by one of a user's devices.

    Fields:
        user: Owner of the device
        token: Expo push token (e.g. "ExponentPushToken[...]")
        platform: ios, android or web
        is_active: False once the gateway reports the token unregistered
            or the user unregisters it
        last_registered_at: Refreshed every time the device re-registers
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="device_tokens",
    )

    token = models.CharField(
        max_length=255,
        help_text="Expo push token",
    )

    platform = models.CharField(
        max_length=10,
        choices=DevicePlatform.choices,
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
    )

    last_registered_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the device last registered this token",
    )

    objects = DeviceTokenQuerySet.as_manager()

    class Meta:
        db_table = "notifications_device_token"
        verbose_name = "device token"
        verbose_name_plural = "device tokens"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "token", "platform"],
                name="notif_device_token_unique",
            ),
        ]
        indexes = [
            models.Index(
                fields=["user", "is_active"],
                name="notif_device_user_active_idx",
            ),
        ]

    def __str__(self) -> str:
        status = "active" if self.is_active else "inactive"
        return f"DeviceToken(user={self.user_id}, {self.platform}, {status})"


# =============================================================================
# Preferences
# =============================================================================


class UserGlobalPreference(BaseModel):
    """
    Global notification switch for a user.

    One-to-One with User. If enabled is False, no push is attempted
    regardless of category preferences.

    Usage:
        pref, _ = UserGlobalPreference.objects.get_or_create(user=user)
        pref.enabled = False
        pref.save()
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="notification_global_preference",
    )

    enabled = models.BooleanField(
        default=True,
        help_text="Master switch for all notifications",
    )

    class Meta:
        db_table = "notifications_user_global_preference"
        verbose_name = "user global preference"
        verbose_name_plural = "user global preferences"

    def __str__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"GlobalPreference(user={self.user_id}, {status})"


class UserCategoryPreference(BaseModel):
    """
    Category-level notification switch.

    Only categories the user has changed have a row; a missing row means
    the category is enabled.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_category_preferences",
    )

    category = models.CharField(
        max_length=20,
        choices=NotificationCategory.choices,
    )

    enabled = models.BooleanField(
        default=True,
    )

    class Meta:
        db_table = "notifications_user_category_preference"
        verbose_name = "user category preference"
        verbose_name_plural = "user category preferences"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "category"],
                name="unique_user_category_preference",
            ),
        ]

    def __str__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"CategoryPreference(user={self.user_id}, {self.category}, {status})"
