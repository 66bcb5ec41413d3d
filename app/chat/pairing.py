"""
Canonical pairing of two user identities.

Every place that needs to address "the conversation between A and B" goes
through this module: the conversation context store keys its rows with it,
messages carry it as ``pair_key``, and the realtime channel names its
groups from it. Keeping one implementation means a thread can never be
split across two rooms or two context records.

    canonical_pair_key(a, b) == canonical_pair_key(b, a)
    canonical_pair_key("u2", "u1") == "u1-u2"
"""

from __future__ import annotations

from typing import Any

ROOM_GROUP_PREFIX = "chat."


def _identity(value: Any) -> str:
    """String form of a user, primary key or raw id."""
    return str(getattr(value, "pk", value))


def canonical_pair_key(user_a: Any, user_b: Any) -> str:
    """
    Order-independent key for a pair of identities.

    Both identities are converted to strings, sorted lexicographically and
    joined with ``-``. Accepts model instances, UUIDs or strings.
    """
    first, second = sorted((_identity(user_a), _identity(user_b)))
    return f"{first}-{second}"


# Room keys are the same value; clients compute them identically
room_key = canonical_pair_key


def room_group_name(user_a: Any, user_b: Any) -> str:
    """Channel layer group name for the pair's realtime room."""
    return f"{ROOM_GROUP_PREFIX}{canonical_pair_key(user_a, user_b)}"
