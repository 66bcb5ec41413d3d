"""
Views for notification API.

Endpoints:
    Devices:
        POST   /api/v1/notifications/devices/      - Register a device token
        DELETE /api/v1/notifications/devices/      - Unregister a device token

    Preferences:
        GET /api/v1/notifications/preferences/     - Current switches + token count
        PUT /api/v1/notifications/preferences/     - Update any subset of switches

    Send:
        POST /api/v1/notifications/send/           - Staff-only manual push

Usage:
    # In urls.py
    from notifications.views import DeviceView, PreferenceViewSet, SendNotificationView

    path("devices/", DeviceView.as_view(), name="devices")
    path("preferences/", PreferenceViewSet.as_view({"get": "list", "put": "update"}))
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.serializers import (
    DeviceRegistrationResponseSerializer,
    DeviceTokenSerializer,
    NotificationOutcomeSerializer,
    PreferencesResponseSerializer,
    PreferencesSerializer,
    RegisterDeviceSerializer,
    SendNotificationSerializer,
    UnregisterDeviceSerializer,
)
from notifications.services import (
    DeviceTokenService,
    PreferenceService,
    PushNotificationService,
)


def _failure(result) -> Response:
    body = {"error": result.error, "error_code": result.error_code}
    if result.errors:
        body["errors"] = result.errors
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


class DeviceView(APIView):
    """
    Device token registration for push notifications.

    Permissions:
    - Authenticated users manage their own devices only
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="register_device",
        summary="Register device token",
        description=(
            "Register an Expo push token for the current user's device. "
            "Registering a known token again refreshes it."
        ),
        request=RegisterDeviceSerializer,
        responses={200: DeviceRegistrationResponseSerializer},
        tags=["Notifications - Devices"],
    )
    def post(self, request):
        serializer = RegisterDeviceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DeviceTokenService.register(
            user=request.user,
            token=serializer.validated_data["token"],
            platform=serializer.validated_data["platform"],
        )
        if not result.success:
            return _failure(result)

        return Response(
            {
                "device": DeviceTokenSerializer(result.data).data,
                "token_count": DeviceTokenService.active_token_count(request.user),
            }
        )

    @extend_schema(
        operation_id="unregister_device",
        summary="Unregister device token",
        request=UnregisterDeviceSerializer,
        responses={200: OpenApiResponse(description="{'removed': int, 'token_count': int}")},
        tags=["Notifications - Devices"],
    )
    def delete(self, request):
        serializer = UnregisterDeviceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DeviceTokenService.unregister(
            user=request.user,
            token=serializer.validated_data["token"],
        )
        if not result.success:
            return _failure(result)

        return Response(
            {
                "removed": result.data,
                "token_count": DeviceTokenService.active_token_count(request.user),
            }
        )


class PreferenceViewSet(viewsets.ViewSet):
    """
    ViewSet for managing user notification preferences.

    Provides:
    - list: GET / - Current switches and active device count
    - update: PUT / - Change any of enabled, messages, announcements,
      subscription, punishments

    Permissions:
    - All endpoints require authentication
    - Users can only manage their own preferences
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_notification_preferences",
        summary="Get notification preferences",
        responses={200: PreferencesResponseSerializer},
        tags=["Notifications - Preferences"],
    )
    def list(self, request):
        return Response(
            {
                "preferences": PreferenceService.get_preferences(request.user),
                "device_tokens_count": DeviceTokenService.active_token_count(request.user),
            }
        )

    @extend_schema(
        operation_id="update_notification_preferences",
        summary="Update notification preferences",
        description="Only the switches present in the body are changed.",
        request=PreferencesSerializer,
        responses={200: PreferencesSerializer},
        tags=["Notifications - Preferences"],
    )
    def update(self, request):
        serializer = PreferencesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PreferenceService.update_preferences(
            request.user, **serializer.validated_data
        )
        if not result.success:
            return _failure(result)

        return Response({"preferences": result.data})


class SendNotificationView(APIView):
    """
    POST /api/v1/notifications/send/

    Staff tool for pushing an arbitrary notification to a user. Honors the
    receiver's preferences like any other notification.
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="send_notification",
        summary="Send notification (staff)",
        request=SendNotificationSerializer,
        responses={
            200: NotificationOutcomeSerializer,
            403: OpenApiResponse(description="Caller is not staff"),
            404: OpenApiResponse(description="Target user not found"),
        },
        tags=["Notifications - Admin"],
    )
    def post(self, request):
        serializer = SendNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        receiver = (
            get_user_model()
            .objects.filter(id=data["user_id"], is_active=True)
            .first()
        )
        if receiver is None:
            return Response(
                {"error": "Target user not found", "error_code": "USER_NOT_FOUND"},
                status=status.HTTP_404_NOT_FOUND,
            )

        outcome = PushNotificationService.notify(
            receiver=receiver,
            category=data["category"],
            title=data["title"],
            body=data["body"],
            data=data["data"],
        )
        return Response(NotificationOutcomeSerializer(outcome.as_dict()).data)
