"""
Chat app for direct messaging.

This app handles:
- Direct (1:1) messages between marketplace users
- Conversation context (which item a pair is talking about)
- WebSocket delivery of messages and typing indicators

Related apps:
    - authentication: User model for participants
    - notifications: Push notification fan-out for new messages

Usage:
    from chat.services import MessageService

    result = MessageService.send_message(sender=alice, receiver_id=bob.id, text="Hi!")
"""
