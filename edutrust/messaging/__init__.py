"""Messaging gate -- policy enforcement at message-send time."""

from edutrust.messaging.gate import MessagingGate
from edutrust.messaging.models import BlockedResult, Incident, Message, MessageDraft, Notification

__all__ = [
    "BlockedResult",
    "Incident",
    "Message",
    "MessageDraft",
    "MessagingGate",
    "Notification",
]
