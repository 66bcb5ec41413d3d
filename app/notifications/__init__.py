"""
Notifications app for push notification delivery.

This app provides:
- DeviceToken model for Expo push tokens
- Global and per-category notification switches
- PushNotificationService for preference-aware fan-out
- Celery task notifying receivers of new chat messages
- REST API for devices, preferences and staff sends

Usage:
    from notifications.services import PushNotificationService

    outcome = PushNotificationService.notify(
        receiver=user,
        category="announcements",
        title="Spring sale",
        body="Everything 20% off this weekend",
    )
"""
