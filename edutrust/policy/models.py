"""Data models for text policy checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Ordinal rank used to summarize a set of violations."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.NONE: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}


class ViolationType(Enum):
    """Categories a piece of text can be flagged for."""

    PHONE_NUMBER = "phone_number"
    EMAIL = "email"
    EXTERNAL_LINK = "external_link"
    PLATFORM_MENTION = "platform_mention"
    OFF_PLATFORM_REQUEST = "off_platform_request"


@dataclass(frozen=True)
class PolicyViolation:
    """A single detection, created once per matched span or keyword."""

    type: ViolationType
    matched_text: str
    severity: Severity
    message: str

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "matched_text": self.matched_text,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class PolicyCheckResult:
    """Outcome of checking one piece of text."""

    blocked: bool
    violations: tuple[PolicyViolation, ...] = field(default_factory=tuple)
    sanitized_text: str = ""
    severity: Severity = Severity.NONE

    @property
    def categories(self) -> list[ViolationType]:
        """Distinct violation categories, in detection order."""
        seen: list[ViolationType] = []
        for v in self.violations:
            if v.type not in seen:
                seen.append(v.type)
        return seen

    def to_dict(self) -> dict:
        return {
            "blocked": self.blocked,
            "violations": [v.to_dict() for v in self.violations],
            "sanitized_text": self.sanitized_text,
            "severity": self.severity.value,
        }


def max_severity(violations: list[PolicyViolation] | tuple[PolicyViolation, ...]) -> Severity:
    """Highest severity among *violations*, or ``Severity.NONE``."""
    result = Severity.NONE
    for v in violations:
        if v.severity.rank > result.rank:
            result = v.severity
    return result
