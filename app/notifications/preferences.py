"""
Notification preference resolution.

This module handles the hierarchical preference resolution:
Global -> Category

The resolution returns a ResolvedPreferences dataclass telling the fan-out
whether a notification of a given category may be pushed to a user.

Design Decisions:
    - TTL-based caching (5 min) for preference lookups
    - Missing rows resolve to enabled
    - PreferenceService invalidates a user's entries whenever it writes

Usage:
    from notifications.preferences import PreferenceResolver

    prefs = PreferenceResolver.resolve(user, NotificationCategory.MESSAGES)
    if prefs.blocked:
        # skip, prefs.blocked_reason says why
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from django.core.cache import cache

from notifications.models import (
    NotificationCategory,
    SkipReason,
    UserCategoryPreference,
    UserGlobalPreference,
)

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


# Cache configuration
PREFERENCE_CACHE_TTL = 300  # 5 minutes
PREFERENCE_CACHE_PREFIX = "notif_pref"


@dataclass(frozen=True)
class ResolvedPreferences:
    """
    Resolved notification preferences for a user/category combination.

    Attributes:
        blocked: True if the global or the category switch is off
        blocked_reason: If blocked, the SkipReason value
    """

    blocked: bool = False
    blocked_reason: str | None = None

    @property
    def push_enabled(self) -> bool:
        return not self.blocked


ALLOWED = ResolvedPreferences()


class PreferenceResolver:
    """
    Resolves notification preferences using the hierarchy:
    Global -> Category

    Uses TTL-based caching to reduce database queries.
    """

    @staticmethod
    def _get_cache_key(user_id: UUID | str, category: str) -> str:
        return f"{PREFERENCE_CACHE_PREFIX}:{user_id}:{category}"

    @classmethod
    def resolve(
        cls,
        user: User,
        category: str,
        use_cache: bool = True,
    ) -> ResolvedPreferences:
        """
        Resolve preferences for a single user/category combination.

        Args:
            user: The user to resolve preferences for
            category: A NotificationCategory value
            use_cache: Whether to use cache (default True)

        Returns:
            ResolvedPreferences
        """
        cache_key = cls._get_cache_key(user.pk, category)
        if use_cache:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        resolved = cls._resolve_from_db(user, category)

        if use_cache:
            cache.set(cache_key, resolved, timeout=PREFERENCE_CACHE_TTL)

        return resolved

    @classmethod
    def _resolve_from_db(cls, user: User, category: str) -> ResolvedPreferences:
        """
        Resolve preferences from database without caching.

        Hierarchy:
        1. Global disabled -> block
        2. Category disabled -> block
        3. Otherwise allowed
        """
        global_enabled = (
            UserGlobalPreference.objects.filter(user=user)
            .values_list("enabled", flat=True)
            .first()
        )
        if global_enabled is False:
            return ResolvedPreferences(
                blocked=True,
                blocked_reason=SkipReason.GLOBAL_DISABLED,
            )

        category_enabled = (
            UserCategoryPreference.objects.filter(user=user, category=category)
            .values_list("enabled", flat=True)
            .first()
        )
        if category_enabled is False:
            return ResolvedPreferences(
                blocked=True,
                blocked_reason=SkipReason.CATEGORY_DISABLED,
            )

        return ALLOWED

    @classmethod
    def invalidate_cache(cls, user_id: UUID | str) -> None:
        """Drop every cached category resolution for a user."""
        cache.delete_many(
            [cls._get_cache_key(user_id, category) for category in NotificationCategory.values]
        )
        logger.debug(f"Preference cache invalidated for user {user_id}")
