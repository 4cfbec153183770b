"""Policy engine -- classifies text against the shared rule table.

``check_policy`` is pure and total: every active rule runs against the
full text on every call, any violation blocks, and only rules that carry
a redaction token rewrite the sanitized copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from edutrust.policy.models import (
    PolicyCheckResult,
    PolicyViolation,
    Severity,
    ViolationType,
    max_severity,
)
from edutrust.policy.rules import MASK_TABLE, RULE_TABLE, RuleEntry
from edutrust.utils.logging import get_logger

logger = get_logger(__name__)

CONTACT_SHARE_MESSAGE = (
    "For your safety, sharing contact information is not allowed on EduBridge. "
    "All communication happens securely within the platform."
)
GENERIC_BLOCK_MESSAGE = (
    "This message contains content that isn't allowed on EduBridge. "
    "Please revise and try again."
)


@dataclass(frozen=True)
class EnforcementPolicy:
    """Selects which rule table categories are active for a caller."""

    categories: frozenset[ViolationType] = frozenset(ViolationType)

    @classmethod
    def only(cls, *categories: ViolationType) -> EnforcementPolicy:
        return cls(categories=frozenset(categories))

    def is_active(self, category: ViolationType) -> bool:
        return category in self.categories

    def entries(self, table: Iterable[RuleEntry] = RULE_TABLE) -> list[RuleEntry]:
        return [e for e in table if e.category in self.categories]


FULL_ENFORCEMENT = EnforcementPolicy()


def check_policy(
    text: Optional[str],
    enforcement: Optional[EnforcementPolicy] = None,
    table: Iterable[RuleEntry] = RULE_TABLE,
) -> PolicyCheckResult:
    """Check *text* against every active rule and return the aggregate result."""
    text = text or ""
    enforcement = enforcement or FULL_ENFORCEMENT

    violations: list[PolicyViolation] = []
    sanitized = text

    for entry in enforcement.entries(table):
        for match in entry.rule.matches(text):
            violations.append(
                PolicyViolation(
                    type=entry.category,
                    matched_text=match,
                    severity=entry.severity,
                    message=entry.message_for(match),
                )
            )
        if entry.redaction is not None:
            sanitized = entry.rule.substitute(sanitized, entry.redaction)

    result = PolicyCheckResult(
        blocked=len(violations) > 0,
        violations=tuple(violations),
        sanitized_text=sanitized,
        severity=max_severity(violations),
    )
    if result.blocked:
        logger.debug(
            "policy_violations_detected",
            count=len(violations),
            categories=[c.value for c in result.categories],
            severity=result.severity.value,
        )
    return result


def mask_sensitive_content(text: Optional[str]) -> str:
    """Obfuscate phone numbers, emails and links for display.

    Read-path only; unrelated to ``PolicyCheckResult.sanitized_text``.
    """
    masked = text or ""
    for entry in MASK_TABLE:
        masked = entry.rule.substitute(masked, entry.token)
    return masked


def get_block_message(violations: Iterable[PolicyViolation]) -> str:
    """Human-readable explanation for a blocked text."""
    violations = list(violations)
    if not violations:
        return ""
    if any(v.severity == Severity.HIGH for v in violations):
        return CONTACT_SHARE_MESSAGE
    return GENERIC_BLOCK_MESSAGE
