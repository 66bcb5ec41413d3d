"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/token/            - Obtain JWT access/refresh pair (email + password)
    /api/v1/auth/token/refresh/    - Exchange a refresh token for a new access token

Registration, password reset and social login belong to the account
service and are not served here.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

app_name = "authentication"

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]
