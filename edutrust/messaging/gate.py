"""Messaging gate -- enforces communication controls when a message is sent.

Checks run in a fixed priority order and the first hit wins:

1. Contact sharing (phone / email), when ``block_phone_email_sharing`` is on
2. External links, when ``block_external_links`` is on
3. Caller-configured blocked keywords

A blocked send appends one incident and one admin notification and never
persists the message. An allowed send appends the message only. The whole
evaluate-and-append sequence runs under the store lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from edutrust.config import CommunicationControls
from edutrust.messaging.models import (
    BlockedResult,
    Incident,
    IncidentType,
    Message,
    MessageDraft,
    Notification,
    new_id,
    snippet,
)
from edutrust.policy.engine import EnforcementPolicy, check_policy, mask_sensitive_content
from edutrust.policy.models import Severity, ViolationType
from edutrust.policy.rules import KeywordList
from edutrust.storage.record_store import INCIDENTS, MESSAGES, NOTIFICATIONS, RecordStore, utc_now
from edutrust.utils.logging import get_logger

logger = get_logger(__name__)

CONTACT_SHARE = EnforcementPolicy.only(ViolationType.PHONE_NUMBER, ViolationType.EMAIL)
EXTERNAL_LINKS = EnforcementPolicy.only(ViolationType.EXTERNAL_LINK)

CONTACT_SHARE_REASON = "Phone numbers and email addresses cannot be shared in messages."
EXTERNAL_LINK_REASON = "External links cannot be shared in messages."


@dataclass(frozen=True)
class _Block:
    incident_type: IncidentType
    severity: Severity
    reason: str
    keyword: Optional[str] = None


class MessagingGate:
    """Applies communication controls to outbound messages."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    # -- checks --------------------------------------------------------------

    @staticmethod
    def _check_contact_share(body: str, controls: CommunicationControls) -> Optional[_Block]:
        if not controls.block_phone_email_sharing:
            return None
        if check_policy(body, CONTACT_SHARE).blocked:
            return _Block(IncidentType.CONTACT_SHARE_ATTEMPT, Severity.HIGH, CONTACT_SHARE_REASON)
        return None

    @staticmethod
    def _check_external_link(body: str, controls: CommunicationControls) -> Optional[_Block]:
        if not controls.block_external_links:
            return None
        if check_policy(body, EXTERNAL_LINKS).blocked:
            return _Block(IncidentType.EXTERNAL_LINK_ATTEMPT, Severity.MEDIUM, EXTERNAL_LINK_REASON)
        return None

    @staticmethod
    def _check_keywords(body: str, keywords: KeywordList) -> Optional[_Block]:
        found = keywords.first_match(body)
        if found is None:
            return None
        return _Block(
            IncidentType.POLICY_VIOLATION,
            Severity.MEDIUM,
            f'Messages cannot contain restricted words like "{found}".',
            keyword=found,
        )

    def evaluate(self, body: str, controls: CommunicationControls) -> Optional[_Block]:
        """Return the first block that applies to *body*, or None."""
        keywords = KeywordList(tuple(controls.blocked_keywords))
        return (
            self._check_contact_share(body, controls)
            or self._check_external_link(body, controls)
            or self._check_keywords(body, keywords)
        )

    # -- public API ----------------------------------------------------------

    def create_message(
        self, draft: MessageDraft, controls: CommunicationControls
    ) -> Union[Message, BlockedResult]:
        """Run the gate on *draft* and persist the outcome."""
        body = draft.body or ""
        with self._store.lock:
            block = self.evaluate(body, controls)
            if block is not None:
                return self._record_block(draft, block)

            message = Message.from_draft(draft, created_at=utc_now())
            self._store.append(MESSAGES, message.to_dict())

        logger.debug("message_persisted", message_id=message.id, thread_id=message.thread_id)
        return message

    def _record_block(self, draft: MessageDraft, block: _Block) -> BlockedResult:
        now = utc_now()
        incident = Incident(
            id=new_id("incident"),
            type=block.incident_type,
            severity=block.severity,
            actor_user_id=draft.from_user_id,
            student_id=draft.student_id,
            tutor_id=draft.tutor_id,
            message_snippet=snippet(draft.body),
            created_at=now,
        )
        self._store.append(INCIDENTS, incident.to_dict())

        payload: dict = {"incident_id": incident.id}
        if block.keyword is not None:
            payload["keyword"] = block.keyword
        else:
            payload["type"] = block.incident_type.value

        notification = Notification(
            id=new_id("notif"),
            for_role="admin",
            type="policy_block",
            title="Message blocked",
            message=block.reason,
            payload=payload,
            created_at=now,
        )
        self._store.append(NOTIFICATIONS, notification.to_dict())

        logger.info(
            "message_blocked",
            incident_id=incident.id,
            incident_type=block.incident_type.value,
            severity=block.severity.value,
            actor=draft.from_user_id,
        )
        return BlockedResult(reason=block.reason, incident_id=incident.id)

    def list_thread(self, thread_id: str) -> list[Message]:
        """Messages in *thread_id*, oldest first."""
        records = self._store.list(MESSAGES, thread_id=thread_id)
        messages = [Message.from_dict(r) for r in records]
        messages.sort(key=lambda m: m.created_at)
        return messages

    @staticmethod
    def render_body(message: Message, controls: CommunicationControls) -> str:
        """Body as shown to readers, masked when ``mask_phone_email`` is on."""
        if controls.mask_phone_email:
            return mask_sensitive_content(message.body)
        return message.body

    def list_incidents(self) -> list[dict]:
        return self._store.list(INCIDENTS)
