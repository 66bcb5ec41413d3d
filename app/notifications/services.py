"""
Notification service layer.

This module provides the business logic for push notification fan-out and
the user-facing management of devices and preferences.

Services:
    PushNotificationService: Preference-aware fan-out to a user's devices
    DeviceTokenService: Device token registration and removal
    PreferenceService: User notification preference management

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Fan-out never raises for gateway problems; they become failure counts
    - Preference writes invalidate the resolver cache immediately

Usage:
    from notifications.services import PushNotificationService

    outcome = PushNotificationService.notify(
        receiver=bob,
        category=NotificationCategory.MESSAGES,
        title="New message from Alice",
        body="Is the jacket still available?",
        data={"type": "message"},
    )
    if outcome.skipped_reason:
        ...
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from django.utils import timezone

from core.exceptions import ExternalServiceError, ValidationError
from core.services import BaseService, ServiceResult
from notifications.models import (
    DevicePlatform,
    DeviceToken,
    NotificationCategory,
    SkipReason,
    UserCategoryPreference,
    UserGlobalPreference,
)
from notifications.preferences import PreferenceResolver
from notifications.push import ExpoPushClient

if TYPE_CHECKING:
    from authentication.models import User


@dataclass(frozen=True)
class NotificationOutcome:
    """
    Result of one fan-out.

    Attributes:
        success_count: Devices the gateway accepted the push for
        failure_count: Devices whose push failed
        skipped_reason: SkipReason value when nothing was attempted
    """

    success_count: int = 0
    failure_count: int = 0
    skipped_reason: str | None = None

    @property
    def attempted(self) -> bool:
        return self.skipped_reason is None

    def as_dict(self) -> dict:
        data = asdict(self)
        if self.skipped_reason is not None:
            data["skipped_reason"] = str(self.skipped_reason)
        return data


class PushNotificationService(BaseService):
    """
    Service for delivering push notifications.

    Methods:
        notify: Push a notification to every active device of a user
    """

    @classmethod
    def notify(
        cls,
        receiver: User,
        title: str,
        body: str,
        data: dict | None = None,
        category: str = NotificationCategory.MESSAGES,
        client: ExpoPushClient | None = None,
    ) -> NotificationOutcome:
        """
        Push a notification to the receiver's active devices.

        Implementation:
            1. Global switch off -> skip (global_disabled)
            2. Category switch off -> skip (category_disabled)
            3. No active device token -> skip (no_device_token)
            4. One gateway request per token, counted per token
            5. Tokens reported as DeviceNotRegistered are deactivated

        Args:
            receiver: User to notify
            title: Notification title
            body: Notification body
            data: Extra payload delivered to the app
            category: NotificationCategory value checked against preferences
            client: Push client override (defaults to settings)

        Returns:
            NotificationOutcome

        Raises:
            ValidationError: category is not a NotificationCategory
        """
        if category not in NotificationCategory.values:
            raise ValidationError(
                f"Invalid notification category: {category}",
                error_code="INVALID_CATEGORY",
            )

        logger = cls.get_logger()

        prefs = PreferenceResolver.resolve(receiver, category)
        if prefs.blocked:
            logger.info(
                f"Notification to user {receiver.pk} skipped: {prefs.blocked_reason}"
            )
            return NotificationOutcome(skipped_reason=prefs.blocked_reason)

        devices = list(
            DeviceToken.objects.for_user(receiver).active().values_list("id", "token")
        )
        if not devices:
            logger.info(
                f"Notification to user {receiver.pk} skipped: {SkipReason.NO_DEVICE_TOKEN}"
            )
            return NotificationOutcome(skipped_reason=SkipReason.NO_DEVICE_TOKEN)

        client = client or ExpoPushClient.from_settings()
        success_count = 0
        failure_count = 0
        unregistered = []

        for device_id, token in devices:
            try:
                ticket = client.send(token, title, body, data)
            except ExternalServiceError as e:
                failure_count += 1
                logger.warning(f"Push to device {device_id} failed: {e}")
                continue

            if ticket.ok:
                success_count += 1
                continue

            failure_count += 1
            logger.warning(
                f"Push to device {device_id} rejected: "
                f"{ticket.error_code or ticket.message}"
            )
            if ticket.device_not_registered:
                unregistered.append(device_id)

        if unregistered:
            DeviceToken.objects.filter(id__in=unregistered).update(
                is_active=False, updated_at=timezone.now()
            )
            logger.info(f"Deactivated {len(unregistered)} unregistered device tokens")

        logger.info(
            f"Notification to user {receiver.pk} ({category}): "
            f"{success_count} sent, {failure_count} failed"
        )
        return NotificationOutcome(
            success_count=success_count,
            failure_count=failure_count,
        )


class DeviceTokenService(BaseService):
    """
    Service for device token management.

    Methods:
        register: Add or refresh a device token
        unregister: Remove a device token
        active_token_count: Number of devices that can receive pushes
    """

    @classmethod
    def register(
        cls,
        user: User,
        token: str | None,
        platform: str | None,
    ) -> ServiceResult[DeviceToken]:
        """
        Register a push token for one of the user's devices.

        Re-registering an existing (token, platform) refreshes
        last_registered_at and reactivates it.

        Error codes:
            VALIDATION_ERROR: token or platform missing
            INVALID_PLATFORM: platform is not ios, android or web
        """
        missing = cls.validate_required(token=token, platform=platform)
        if missing is not None:
            return missing

        if platform not in DevicePlatform.values:
            return ServiceResult.failure(
                f"Invalid platform: {platform}. Must be one of {DevicePlatform.values}",
                error_code="INVALID_PLATFORM",
            )

        device, created = DeviceToken.objects.update_or_create(
            user=user,
            token=token,
            platform=platform,
            defaults={"is_active": True, "last_registered_at": timezone.now()},
        )

        action = "Registered" if created else "Refreshed"
        cls.get_logger().info(f"{action} {platform} device token for user {user.id}")
        return ServiceResult.success(device)

    @classmethod
    def unregister(cls, user: User, token: str | None) -> ServiceResult[int]:
        """
        Remove a token from all of the user's platforms.

        Returns:
            ServiceResult with the number of rows removed

        Error codes:
            VALIDATION_ERROR: token missing
        """
        missing = cls.validate_required(token=token)
        if missing is not None:
            return missing

        deleted, _ = DeviceToken.objects.for_user(user).filter(token=token).delete()

        cls.get_logger().info(f"Removed {deleted} device tokens for user {user.id}")
        return ServiceResult.success(deleted)

    @classmethod
    def active_token_count(cls, user: User) -> int:
        return DeviceToken.objects.for_user(user).active().count()


class PreferenceService(BaseService):
    """
    Service for user notification preference management.

    Preferences are exposed as a flat mapping:
        {"enabled": bool, "messages": bool, "announcements": bool,
         "subscription": bool, "punishments": bool}

    Methods:
        get_preferences: Current switches with defaults applied
        update_preferences: Change any subset of the switches
    """

    @classmethod
    def get_preferences(cls, user: User) -> dict[str, bool]:
        global_enabled = (
            UserGlobalPreference.objects.filter(user=user)
            .values_list("enabled", flat=True)
            .first()
        )
        preferences = {"enabled": global_enabled is not False}

        overrides = dict(
            UserCategoryPreference.objects.filter(user=user).values_list(
                "category", "enabled"
            )
        )
        for category in NotificationCategory.values:
            preferences[category] = overrides.get(category, True)

        return preferences

    @classmethod
    def update_preferences(
        cls,
        user: User,
        enabled: bool | None = None,
        **categories: bool | None,
    ) -> ServiceResult[dict[str, bool]]:
        """
        Update the global switch and any category switches.

        Arguments left as None are unchanged.

        Args:
            user: The user to update
            enabled: Global switch
            **categories: NotificationCategory value -> enabled

        Returns:
            ServiceResult with the full preference mapping after the update

        Error codes:
            INVALID_CATEGORY: Unknown category name
        """
        unknown = sorted(set(categories) - set(NotificationCategory.values))
        if unknown:
            return ServiceResult.failure(
                f"Invalid category: {', '.join(unknown)}",
                error_code="INVALID_CATEGORY",
            )

        with cls.atomic():
            if enabled is not None:
                UserGlobalPreference.objects.update_or_create(
                    user=user,
                    defaults={"enabled": enabled},
                )
            for category, value in categories.items():
                if value is None:
                    continue
                UserCategoryPreference.objects.update_or_create(
                    user=user,
                    category=category,
                    defaults={"enabled": value},
                )

        PreferenceResolver.invalidate_cache(user.id)

        preferences = cls.get_preferences(user)
        cls.get_logger().info(f"Notification preferences updated for user {user.id}: {preferences}")
        return ServiceResult.success(preferences)
