"""
URL configuration for notifications API.

Routes:
    /devices/         - Register (POST) / unregister (DELETE) a device token
    /preferences/     - Get (GET) / update (PUT) preferences
    /send/            - Staff-only manual send (POST)

All URLs are prefixed with /api/v1/notifications/ in the main URL configuration.
"""

from django.urls import path

from notifications.views import DeviceView, PreferenceViewSet, SendNotificationView

app_name = "notifications"

urlpatterns = [
    path("devices/", DeviceView.as_view(), name="devices"),
    path(
        "preferences/",
        PreferenceViewSet.as_view({"get": "list", "put": "update"}),
        name="preferences",
    ),
    path("send/", SendNotificationView.as_view(), name="send"),
]
