"""
Authentication models.

The messaging core only needs a stable identity per participant plus the
few display fields that travel with messages and push notifications:
- User: email-based account with a UUID primary key, display name and avatar

Related files:
    - managers.py: Custom user manager for email-based creation
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Fields:
        id: UUID primary key; its string form is what the canonical pair
            key sorts and joins
        email: Login identifier, unique
        name: Display name shown to chat counterparts and in notifications
        profile_picture: Avatar URL (uploads are handled outside this service)
        is_active: Inactive users cannot receive messages or connect
        is_staff: Admin site and manual notification sends
        date_joined / updated_at: Timestamps
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name shown in conversations",
    )
    profile_picture = models.URLField(
        max_length=500,
        blank=True,
        help_text="Avatar URL",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        """Return the display name, or the email when no name is set."""
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]
