"""Data models for the messaging gate and its audit records."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from edutrust.policy.models import Severity

SNIPPET_LENGTH = 100


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class IncidentType(Enum):
    CONTACT_SHARE_ATTEMPT = "contact_share_attempt"
    EXTERNAL_LINK_ATTEMPT = "external_link_attempt"
    POLICY_VIOLATION = "policy_violation"


@dataclass
class MessageDraft:
    """A message as submitted by a sender, before the gate runs."""

    thread_id: str
    student_id: str
    from_user_id: str
    to_user_id: str
    body: str
    tutor_id: Optional[str] = None


@dataclass
class Message:
    """A persisted message."""

    id: str
    thread_id: str
    student_id: str
    from_user_id: str
    to_user_id: str
    body: str
    created_at: str
    tutor_id: Optional[str] = None
    read: bool = False

    @classmethod
    def from_draft(cls, draft: MessageDraft, created_at: str) -> Message:
        return cls(
            id=new_id("msg"),
            thread_id=draft.thread_id,
            student_id=draft.student_id,
            from_user_id=draft.from_user_id,
            to_user_id=draft.to_user_id,
            body=draft.body,
            created_at=created_at,
            tutor_id=draft.tutor_id,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(
            id=data["id"],
            thread_id=data.get("thread_id", ""),
            student_id=data.get("student_id", ""),
            from_user_id=data.get("from_user_id", ""),
            to_user_id=data.get("to_user_id", ""),
            body=data.get("body", ""),
            created_at=data.get("created_at", ""),
            tutor_id=data.get("tutor_id"),
            read=data.get("read", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BlockedResult:
    """Returned instead of a Message when the gate refuses to send."""

    reason: str
    incident_id: str = ""
    blocked: bool = True


@dataclass
class Incident:
    """Append-only audit record for a blocked message."""

    id: str
    type: IncidentType
    severity: Severity
    actor_user_id: str
    message_snippet: str
    created_at: str
    student_id: Optional[str] = None
    tutor_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "actor_user_id": self.actor_user_id,
            "student_id": self.student_id,
            "tutor_id": self.tutor_id,
            "message_snippet": self.message_snippet,
            "created_at": self.created_at,
        }


def snippet(body: str) -> str:
    return (body or "")[:SNIPPET_LENGTH]


@dataclass
class Notification:
    """Append-only notification addressed to a role."""

    id: str
    for_role: str
    type: str
    title: str
    created_at: str
    message: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    read: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
