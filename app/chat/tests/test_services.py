"""
Tests for chat service layer business logic.

Services covered:
- MessageService: send, thread listing, mark read, delete thread,
  conversation summaries
- ConversationContextService: upsert and lookup

Testing Philosophy:
    Tests focus on observable behavior: ServiceResult states, error codes
    and database state.
"""

import uuid

import pytest
from django.db import DatabaseError
from freezegun import freeze_time
from kombu.exceptions import OperationalError

from authentication.tests.factories import UserFactory
from chat.models import ConversationContext, Message
from chat.services import ConversationContextService, MessageService
from chat.tests.factories import ConversationContextFactory, MessageFactory
from chat.values import ProductReference
from core.exceptions import PersistenceError


# =============================================================================
# MessageService.send_message
# =============================================================================


class TestSendMessage:
    """Tests for MessageService.send_message()."""

    def test_stores_unread_message(self, alice, bob):
        """
        Why it matters: this is the primary happy path for every chat
        message, REST or realtime.
        """
        result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi Bob")

        assert result.success is True
        message = result.data
        assert message.sender == alice
        assert message.receiver == bob
        assert message.text == "Hi Bob"
        assert message.is_read is False
        assert message.created_at is not None

    def test_accepts_receiver_id_as_string(self, alice, bob):
        result = MessageService.send_message(
            sender=alice, receiver_id=str(bob.id), text="Hi"
        )

        assert result.success is True

    def test_strips_surrounding_whitespace(self, alice, bob):
        result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="  hi  ")

        assert result.data.text == "hi"

    def test_stores_product_reference(self, alice, bob):
        product = ProductReference(id="p42", name="Denim jacket")

        result = MessageService.send_message(
            sender=alice, receiver_id=bob.id, text="Still available?", product=product
        )

        assert result.data.product == product

    def test_missing_receiver_fails(self, alice):
        result = MessageService.send_message(sender=alice, receiver_id=None, text="Hi")

        assert result.success is False
        assert result.error_code == "MISSING_RECEIVER"
        assert Message.objects.count() == 0

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_text_fails(self, alice, bob, text):
        result = MessageService.send_message(sender=alice, receiver_id=bob.id, text=text)

        assert result.success is False
        assert result.error_code == "EMPTY_TEXT"
        assert Message.objects.count() == 0

    def test_text_over_limit_fails(self, alice, bob, settings):
        from chat.constants import MESSAGE_CONFIG

        result = MessageService.send_message(
            sender=alice,
            receiver_id=bob.id,
            text="x" * (MESSAGE_CONFIG.MAX_TEXT_LENGTH + 1),
        )

        assert result.error_code == "TEXT_TOO_LONG"

    @pytest.mark.parametrize(
        "product,field_name",
        [
            (ProductReference(id="p" * 65), "product_id"),
            (ProductReference(id="p1", name="n" * 256), "product_name"),
        ],
    )
    def test_product_over_column_limit_fails(self, alice, bob, product, field_name):
        """
        Why it matters: an over-long product field must be rejected as
        input, not surface later as a database error.
        """
        result = MessageService.send_message(
            sender=alice, receiver_id=bob.id, text="Hi", product=product
        )

        assert result.error_code == "PRODUCT_TOO_LONG"
        assert field_name in result.errors
        assert Message.objects.count() == 0

    def test_unknown_receiver_fails(self, alice):
        result = MessageService.send_message(
            sender=alice, receiver_id=uuid.uuid4(), text="Hi"
        )

        assert result.success is False
        assert result.error_code == "RECEIVER_NOT_FOUND"

    def test_malformed_receiver_id_fails(self, alice):
        result = MessageService.send_message(sender=alice, receiver_id="not-a-uuid", text="Hi")

        assert result.error_code == "RECEIVER_NOT_FOUND"

    def test_inactive_receiver_fails(self, alice):
        gone = UserFactory(is_active=False)

        result = MessageService.send_message(sender=alice, receiver_id=gone.id, text="Hi")

        assert result.error_code == "RECEIVER_NOT_FOUND"

    def test_queues_notification_after_commit(
        self, alice, bob, mock_notification_delay, django_capture_on_commit_callbacks
    ):
        """
        Why it matters: the receiver must only be notified about a message
        that is actually stored.
        """
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi")

        assert len(callbacks) == 1
        mock_notification_delay.assert_called_once_with(str(result.data.id))

    def test_notification_not_queued_before_commit(
        self, alice, bob, mock_notification_delay, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=False):
            MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi")

        mock_notification_delay.assert_not_called()

    def test_broker_outage_does_not_fail_send(
        self, alice, bob, mocker, django_capture_on_commit_callbacks
    ):
        """
        Why it matters: notifications are best effort; a broken broker must
        never lose or reject the message itself.
        """
        mocker.patch(
            "notifications.tasks.send_message_notification.delay",
            side_effect=OperationalError("broker unreachable"),
        )

        with django_capture_on_commit_callbacks(execute=True):
            result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi")

        assert result.success is True
        assert Message.objects.filter(id=result.data.id).exists()

    def test_database_error_raises_persistence_error(self, alice, bob, mocker):
        mocker.patch(
            "chat.services.Message.objects.create",
            side_effect=DatabaseError("disk full"),
        )

        with pytest.raises(PersistenceError):
            MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi")


# =============================================================================
# MessageService.list_thread
# =============================================================================


class TestListThread:
    """Tests for MessageService.list_thread()."""

    def test_includes_both_directions_oldest_first(self, alice, bob):
        with freeze_time("2026-03-01 10:00:00"):
            first = MessageFactory(sender=alice, receiver=bob, text="Hi")
        with freeze_time("2026-03-01 10:01:00"):
            second = MessageFactory(sender=bob, receiver=alice, text="Hello")

        thread = list(MessageService.list_thread(alice, bob))

        assert thread == [first, second]

    def test_same_result_from_either_side(self, alice, bob):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=bob, receiver=alice)

        assert list(MessageService.list_thread(alice, bob)) == list(
            MessageService.list_thread(bob, alice)
        )

    def test_excludes_other_pairs(self, alice, bob, carol):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=alice, receiver=carol)
        MessageFactory(sender=carol, receiver=bob)

        thread = MessageService.list_thread(alice, bob)

        assert thread.count() == 1

    def test_appended_message_is_last(self, alice, bob):
        MessageFactory(sender=bob, receiver=alice)

        result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="latest")

        assert list(MessageService.list_thread(alice, bob))[-1] == result.data

    def test_empty_thread(self, alice, bob):
        assert MessageService.list_thread(alice, bob).count() == 0


# =============================================================================
# MessageService.mark_thread_read
# =============================================================================


class TestMarkThreadRead:
    """Tests for MessageService.mark_thread_read()."""

    def test_marks_messages_from_counterpart(self, alice, bob):
        MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=bob, receiver=alice)

        updated = MessageService.mark_thread_read(alice, bob)

        assert updated == 2
        assert not Message.objects.filter(receiver=alice, is_read=False).exists()

    def test_leaves_own_sent_messages_alone(self, alice, bob):
        """
        Why it matters: reading a thread must not mark the counterpart as
        having read what I sent.
        """
        mine = MessageFactory(sender=alice, receiver=bob)

        MessageService.mark_thread_read(alice, bob)

        mine.refresh_from_db()
        assert mine.is_read is False

    def test_leaves_other_senders_alone(self, alice, bob, carol):
        other = MessageFactory(sender=carol, receiver=alice)

        MessageService.mark_thread_read(alice, bob)

        other.refresh_from_db()
        assert other.is_read is False

    def test_idempotent(self, alice, bob):
        MessageFactory(sender=bob, receiver=alice)

        first = MessageService.mark_thread_read(alice, bob)
        second = MessageService.mark_thread_read(alice, bob)

        assert first == 1
        assert second == 0


# =============================================================================
# MessageService.delete_thread
# =============================================================================


class TestDeleteThread:
    """Tests for MessageService.delete_thread()."""

    def test_deletes_both_directions_and_returns_count(self, alice, bob):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=bob, receiver=alice)

        deleted = MessageService.delete_thread(alice, bob)

        assert deleted == 3
        assert MessageService.list_thread(alice, bob).count() == 0
        assert MessageService.list_thread(bob, alice).count() == 0

    def test_other_threads_untouched(self, alice, bob, carol):
        MessageFactory(sender=alice, receiver=bob)
        kept = MessageFactory(sender=alice, receiver=carol)

        MessageService.delete_thread(alice, bob)

        assert Message.objects.filter(id=kept.id).exists()

    def test_context_survives(self, alice, bob):
        MessageFactory(sender=alice, receiver=bob)
        ConversationContextFactory(users=(alice, bob))

        MessageService.delete_thread(alice, bob)

        assert ConversationContextService.get_context(alice, bob) is not None

    def test_empty_thread_returns_zero(self, alice, bob):
        assert MessageService.delete_thread(alice, bob) == 0


# =============================================================================
# MessageService.list_conversations
# =============================================================================


class TestListConversations:
    """Tests for MessageService.list_conversations()."""

    def test_one_entry_per_counterpart(self, alice, bob, carol):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=carol, receiver=alice)

        summaries = MessageService.list_conversations(alice)

        assert {s.counterpart for s in summaries} == {bob, carol}

    def test_counts_and_last_message(self, alice, bob):
        with freeze_time("2026-03-01 09:00:00"):
            MessageFactory(sender=alice, receiver=bob)
        with freeze_time("2026-03-01 09:05:00"):
            MessageFactory(sender=bob, receiver=alice)
        with freeze_time("2026-03-01 09:10:00"):
            latest = MessageFactory(sender=bob, receiver=alice, text="Deal?")

        (summary,) = MessageService.list_conversations(alice)

        assert summary.message_count == 3
        assert summary.unread_count == 2
        assert summary.last_message == latest

    def test_unread_counts_only_messages_to_me(self, alice, bob):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=alice, receiver=bob)

        (alice_view,) = MessageService.list_conversations(alice)
        (bob_view,) = MessageService.list_conversations(bob)

        assert alice_view.unread_count == 0
        assert bob_view.unread_count == 2

    def test_ordered_by_latest_message_desc(self, alice, bob, carol):
        with freeze_time("2026-03-01 08:00:00"):
            MessageFactory(sender=alice, receiver=carol)
        with freeze_time("2026-03-01 09:00:00"):
            MessageFactory(sender=alice, receiver=bob)
        with freeze_time("2026-03-01 10:00:00"):
            MessageFactory(sender=carol, receiver=alice)

        summaries = MessageService.list_conversations(alice)

        assert [s.counterpart for s in summaries] == [carol, bob]

    def test_attaches_context_when_present(self, alice, bob, carol):
        MessageFactory(sender=alice, receiver=bob)
        MessageFactory(sender=alice, receiver=carol)
        context = ConversationContextFactory(users=(bob, alice))

        by_counterpart = {
            s.counterpart: s for s in MessageService.list_conversations(alice)
        }

        assert by_counterpart[bob].context == context
        assert by_counterpart[carol].context is None

    def test_no_messages_no_conversations(self, alice):
        assert MessageService.list_conversations(alice) == []


class TestBuyerSellerScenario:
    """
    A buyer messages a seller about an item, the seller reads it.

    Why it matters: exercises send, list, conversation summaries and mark
    read together the way the mobile app uses them.
    """

    def test_full_exchange(self, alice, bob):
        result = MessageService.send_message(
            sender=alice,
            receiver_id=bob.id,
            text="hi",
            product=ProductReference(id="p1", name="Dress"),
        )
        assert result.success is True

        thread = list(MessageService.list_thread(bob, alice))
        assert len(thread) == 1
        assert thread[0].text == "hi"
        assert thread[0].is_read is False

        (summary,) = MessageService.list_conversations(bob)
        assert summary.counterpart == alice
        assert summary.unread_count == 1
        assert summary.message_count == 1

        assert MessageService.mark_thread_read(bob, alice) == 1

        (summary,) = MessageService.list_conversations(bob)
        assert summary.unread_count == 0


# =============================================================================
# ConversationContextService
# =============================================================================


class TestUpsertContext:
    """Tests for ConversationContextService.upsert_context()."""

    def test_creates_context(self, alice, bob):
        result = ConversationContextService.upsert_context(
            alice, bob, ProductReference(id="p1", name="Dress", image="img.jpg")
        )

        assert result.success is True
        context = result.data
        assert context.product_id == "p1"
        assert context.product_name == "Dress"
        assert context.product_image == "img.jpg"
        assert {context.participant_low, context.participant_high} == {alice, bob}

    def test_last_write_wins_single_row(self, alice, bob):
        """
        Why it matters: either participant may switch the topic; there must
        never be two competing contexts for one pair.
        """
        ConversationContextService.upsert_context(alice, bob, ProductReference(id="p1"))
        ConversationContextService.upsert_context(bob, alice, ProductReference(id="p2"))

        assert ConversationContext.objects.count() == 1
        assert ConversationContextService.get_context(alice, bob).product_id == "p2"

    def test_missing_product_clears_fields(self, alice, bob):
        ConversationContextService.upsert_context(
            alice, bob, ProductReference(id="p1", name="Dress", image="img.jpg")
        )

        result = ConversationContextService.upsert_context(alice, bob, None)

        assert result.data.product_id is None
        assert result.data.product_name == ""
        assert result.data.product_image == ""
        assert result.data.product is None

    def test_database_error_raises_persistence_error(self, alice, bob, mocker):
        mocker.patch(
            "chat.services.ConversationContext.objects.update_or_create",
            side_effect=DatabaseError("locked"),
        )

        with pytest.raises(PersistenceError):
            ConversationContextService.upsert_context(alice, bob, None)

    def test_product_image_over_column_limit_fails(self, alice, bob):
        result = ConversationContextService.upsert_context(
            alice, bob, ProductReference(id="p1", image="i" * 501)
        )

        assert result.success is False
        assert result.error_code == "PRODUCT_TOO_LONG"
        assert "product_image" in result.errors
        assert ConversationContext.objects.count() == 0


class TestGetContext:
    """Tests for ConversationContextService.get_context()."""

    def test_returns_none_when_absent(self, alice, bob):
        assert ConversationContextService.get_context(alice, bob) is None

    def test_found_from_either_side(self, alice, bob):
        context = ConversationContextFactory(users=(alice, bob))

        assert ConversationContextService.get_context(alice, bob) == context
        assert ConversationContextService.get_context(bob, alice) == context


class TestResolveUser:
    """Tests for MessageService.resolve_user()."""

    def test_resolves_active_user(self, alice):
        result = MessageService.resolve_user(str(alice.id))

        assert result.data == alice

    @pytest.mark.parametrize("value", [None, "", "nope", "12345"])
    def test_malformed_ids_not_found(self, db, value):
        result = MessageService.resolve_user(value)

        assert result.error_code == "USER_NOT_FOUND"
