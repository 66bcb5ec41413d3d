"""
Django admin configuration for notification models.

Registers:
- DeviceToken
- UserGlobalPreference
- UserCategoryPreference
"""

from django.contrib import admin

from notifications.models import DeviceToken, UserCategoryPreference, UserGlobalPreference


@admin.register(DeviceToken)
class DeviceTokenAdmin(admin.ModelAdmin):
    list_display = ["user", "platform", "is_active", "last_registered_at", "created_at"]
    list_filter = ["platform", "is_active"]
    search_fields = ["user__email", "token"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-last_registered_at"]


@admin.register(UserGlobalPreference)
class UserGlobalPreferenceAdmin(admin.ModelAdmin):
    list_display = ["user", "enabled", "updated_at"]
    list_filter = ["enabled"]
    search_fields = ["user__email"]
    raw_id_fields = ["user"]


@admin.register(UserCategoryPreference)
class UserCategoryPreferenceAdmin(admin.ModelAdmin):
    list_display = ["user", "category", "enabled", "updated_at"]
    list_filter = ["category", "enabled"]
    search_fields = ["user__email"]
    raw_id_fields = ["user"]
