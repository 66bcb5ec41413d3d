"""
Root URL configuration.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - JWT endpoints
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token
    /api/v1/chat/                  - Direct messaging
        send/                      - Append a message (POST)
        conversations/list/        - Conversation summaries (GET)
        conversations/{user_id}/   - Delete the thread with a user (DELETE)
        mark-read/{user_id}/       - Mark the thread with a user read (PUT)
        context/                   - Upsert conversation context (POST)
        context/{user_id}/         - Get conversation context (GET)
        {user_id}/                 - Thread with a user, cursor paginated (GET)
    /api/v1/notifications/         - Push notification management
        devices/                   - Register (POST) / unregister (DELETE) a device token
        preferences/               - Get (GET) / update (PUT) preferences
        send/                      - Staff-only manual send (POST)
    ws/chat/                       - Realtime channel (see chat.routing)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("chat/", include("chat.urls")),
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Messaging Admin"
admin.site.site_title = "Messaging Admin Portal"
admin.site.index_title = "Conversations and notifications"
