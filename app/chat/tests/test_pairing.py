"""
Tests for the canonical pair key shared by contexts, threads and rooms.
"""

import uuid

import pytest

from chat.pairing import canonical_pair_key, room_group_name, room_key


class TestCanonicalPairKey:
    """canonical_pair_key() ordering and format."""

    def test_sorted_and_joined_with_hyphen(self):
        assert canonical_pair_key("u2", "u1") == "u1-u2"

    @pytest.mark.parametrize(
        "a,b",
        [
            ("alice", "bob"),
            ("10", "9"),
            (uuid.UUID(int=5), uuid.UUID(int=3)),
        ],
    )
    def test_commutative(self, a, b):
        """
        Why it matters: both participants must compute the same key or a
        conversation splits into two threads.
        """
        assert canonical_pair_key(a, b) == canonical_pair_key(b, a)

    def test_sorts_as_strings_not_numbers(self):
        assert canonical_pair_key(9, 10) == "10-9"

    def test_same_identity_twice(self):
        assert canonical_pair_key("u1", "u1") == "u1-u1"

    def test_uuid_and_its_string_form_agree(self):
        user_id = uuid.uuid4()
        other = uuid.uuid4()

        assert canonical_pair_key(user_id, other) == canonical_pair_key(
            str(user_id), str(other)
        )

    def test_accepts_model_instances(self, alice, bob):
        assert canonical_pair_key(alice, bob) == canonical_pair_key(alice.id, bob.id)


class TestRoomNaming:
    """Room keys and channel layer group names."""

    def test_room_key_is_the_pair_key(self):
        assert room_key("b", "a") == canonical_pair_key("a", "b")

    def test_group_name_is_prefixed_pair_key(self):
        assert room_group_name("u2", "u1") == "chat.u1-u2"

    def test_group_name_is_valid_for_channel_layers(self):
        """Channels only accepts ASCII alphanumerics, hyphens, underscores and periods under 100 chars."""
        name = room_group_name(uuid.uuid4(), uuid.uuid4())

        assert len(name) < 100
        assert all(c.isalnum() or c in "-_." for c in name)
