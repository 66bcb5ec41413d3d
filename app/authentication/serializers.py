"""
Serializers for user data embedded in chat and notification responses.
"""

from rest_framework import serializers

from authentication.models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Public view of a chat participant."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "profile_picture"]
        read_only_fields = fields
