"""Text rules and the shared policy rule table.

Every detector is a ``TextRule``: a small immutable object that returns the
spans (or keywords) it found in a piece of text. Four kinds exist:

- ``SubstringRule`` -- case-insensitive keyword / phrase list
- ``PatternRule`` -- regular-expression shapes with optional digit and
  exclusion guards
- ``LengthBandRule`` -- text length inside an inclusive band
- ``SentenceCountBandRule`` -- sentence count inside an inclusive band

``RULE_TABLE`` binds rules to a violation category, a severity and a
redaction token. Both the policy engine and the messaging gate read it, so
contact detection cannot drift between the two.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from edutrust.policy.models import Severity, ViolationType


class RuleKind(Enum):
    SUBSTRING = "substring"
    PATTERN = "pattern"
    LENGTH_BAND = "length_band"
    SENTENCE_COUNT_BAND = "sentence_count_band"


@dataclass(frozen=True)
class TextRule:
    """Base class for all text rules."""

    kind: ClassVar[RuleKind]

    def matches(self, text: str) -> list[str]:
        """Return every match found in *text*, in detection order."""
        raise NotImplementedError

    def hit(self, text: str) -> bool:
        return bool(self.matches(text or ""))

    def substitute(self, text: str, token: str) -> str:
        """Replace each matched span of *text* with *token*."""
        raise NotImplementedError


@dataclass(frozen=True)
class SubstringRule(TextRule):
    """Matches any of *needles* as a case-insensitive substring.

    Matches are reported as the needle itself, in needle order.
    """

    kind: ClassVar[RuleKind] = RuleKind.SUBSTRING

    needles: tuple[str, ...] = ()

    def matches(self, text: str) -> list[str]:
        lower = (text or "").lower()
        return [n for n in self.needles if n and n.lower() in lower]

    def substitute(self, text: str, token: str) -> str:
        for needle in self.needles:
            if needle:
                text = re.sub(re.escape(needle), token, text, flags=re.IGNORECASE)
        return text


@dataclass(frozen=True)
class PatternRule(TextRule):
    """Matches one or more regex shapes.

    A match is kept only if it carries at least ``min_digits`` digits and
    contains none of the ``exclude`` fragments (case-insensitive).
    """

    kind: ClassVar[RuleKind] = RuleKind.PATTERN

    patterns: tuple[re.Pattern[str], ...] = ()
    min_digits: int = 0
    exclude: tuple[str, ...] = ()

    def accepts(self, span: str) -> bool:
        if self.min_digits and len(_NON_DIGIT.sub("", span)) < self.min_digits:
            return False
        lowered = span.lower()
        return not any(fragment in lowered for fragment in self.exclude)

    def matches(self, text: str) -> list[str]:
        found: list[str] = []
        for pattern in self.patterns:
            for m in pattern.finditer(text or ""):
                if self.accepts(m.group(0)):
                    found.append(m.group(0))
        return found

    def substitute(self, text: str, token: str) -> str:
        """Replace every accepted match span in *text* with *token*.

        Works span by span, so a short match never rewrites part of a
        longer one elsewhere in the text.
        """

        def _replace(m: re.Match[str]) -> str:
            return token if self.accepts(m.group(0)) else m.group(0)

        for pattern in self.patterns:
            text = pattern.sub(_replace, text)
        return text


@dataclass(frozen=True)
class LengthBandRule(TextRule):
    """Matches the whole text when its length falls in ``[low, high]``.

    ``high=None`` leaves the band open-ended.
    """

    kind: ClassVar[RuleKind] = RuleKind.LENGTH_BAND

    low: int = 0
    high: Optional[int] = None

    def matches(self, text: str) -> list[str]:
        text = text or ""
        if len(text) < self.low:
            return []
        if self.high is not None and len(text) > self.high:
            return []
        return [text]


@dataclass(frozen=True)
class SentenceCountBandRule(TextRule):
    """Matches the whole text when its sentence count falls in ``[low, high]``.

    Sentences are the non-blank segments left after splitting on ``.!?``.
    """

    kind: ClassVar[RuleKind] = RuleKind.SENTENCE_COUNT_BAND

    low: int = 0
    high: Optional[int] = None

    def matches(self, text: str) -> list[str]:
        text = text or ""
        count = count_sentences(text)
        if count < self.low:
            return []
        if self.high is not None and count > self.high:
            return []
        return [text]


_NON_DIGIT = re.compile(r"\D")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def count_sentences(text: str) -> int:
    return sum(1 for s in _SENTENCE_SPLIT.split(text or "") if s.strip())


# ---------------------------------------------------------------------------
# Detection constants
# ---------------------------------------------------------------------------

PLATFORM_DOMAIN = "edubridge"

PHONE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"\(\d{3}\)\s?\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"\+?\b\d{1,3}[-.\s]?\d{3,4}[-.\s]?\d{3,4}[-.\s]?\d{3,4}\b"),
    re.compile(r"(?<!\d)\d{10,15}(?!\d)"),
)

EMAIL_PATTERN: re.Pattern[str] = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

LINK_TLDS = ("com", "org", "net", "io", "co", "edu", "gov", "me", "app", "dev", "xyz")

URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"https?://[^\s]+", re.IGNORECASE),
    re.compile(r"www\.[^\s]+", re.IGNORECASE),
    re.compile(r"\b[a-z0-9-]+\.(?:" + "|".join(LINK_TLDS) + r")\b", re.IGNORECASE),
)

PLATFORM_KEYWORDS: tuple[str, ...] = (
    "whatsapp", "telegram", "snapchat", "instagram", "tiktok", "discord",
    "messenger", "signal", "viber", "skype", "zoom", "meet me", "facetime",
    "wechat", "line app", "kik", "facebook", "twitter", "linkedin",
)

OFF_PLATFORM_PHRASES: tuple[str, ...] = (
    "call me", "text me", "message me on", "add me on", "find me on",
    "contact me at", "reach me at", "my number is", "my phone is",
    "pay me directly", "pay outside", "venmo", "paypal", "cash app",
    "meet outside", "meet in person", "private lesson", "outside edubridge",
    "off platform", "off the platform", "bypass", "private tutor",
    "my personal", "my private",
)

BLOCKED_TOKEN = "[BLOCKED]"
LINK_REMOVED_TOKEN = "[link removed]"


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleEntry:
    """Binds a text rule to a category, severity and redaction token.

    ``message`` may reference ``{match}``. ``redaction=None`` means matches
    count toward blocking but are left in the sanitized text.
    """

    rule: TextRule
    category: ViolationType
    severity: Severity
    message: str
    redaction: Optional[str] = None

    def message_for(self, match: str) -> str:
        return self.message.format(match=match)


PHONE_RULE = PatternRule(patterns=PHONE_PATTERNS, min_digits=7)
EMAIL_RULE = PatternRule(patterns=(EMAIL_PATTERN,))
LINK_RULE = PatternRule(patterns=URL_PATTERNS, exclude=(PLATFORM_DOMAIN,))
PLATFORM_RULE = SubstringRule(needles=PLATFORM_KEYWORDS)
SOLICITATION_RULE = SubstringRule(needles=OFF_PLATFORM_PHRASES)

RULE_TABLE: tuple[RuleEntry, ...] = (
    RuleEntry(
        rule=PHONE_RULE,
        category=ViolationType.PHONE_NUMBER,
        severity=Severity.HIGH,
        message="Phone numbers are not allowed for student safety.",
        redaction=BLOCKED_TOKEN,
    ),
    RuleEntry(
        rule=EMAIL_RULE,
        category=ViolationType.EMAIL,
        severity=Severity.HIGH,
        message="Email addresses are not allowed for student safety.",
        redaction=BLOCKED_TOKEN,
    ),
    RuleEntry(
        rule=LINK_RULE,
        category=ViolationType.EXTERNAL_LINK,
        severity=Severity.MEDIUM,
        message="External links are not allowed.",
        redaction=LINK_REMOVED_TOKEN,
    ),
    RuleEntry(
        rule=PLATFORM_RULE,
        category=ViolationType.PLATFORM_MENTION,
        severity=Severity.MEDIUM,
        message="References to external platforms ({match}) are not allowed.",
    ),
    RuleEntry(
        rule=SOLICITATION_RULE,
        category=ViolationType.OFF_PLATFORM_REQUEST,
        severity=Severity.HIGH,
        message="Off-platform contact requests are not allowed.",
    ),
)


@dataclass(frozen=True)
class MaskEntry:
    rule: PatternRule
    token: str


# Display-time masking runs over the raw shapes, without the digit or
# platform-domain guards used for blocking.
MASK_TABLE: tuple[MaskEntry, ...] = (
    MaskEntry(rule=PatternRule(patterns=PHONE_PATTERNS), token="***-***-****"),
    MaskEntry(rule=PatternRule(patterns=(EMAIL_PATTERN,)), token="****@****.***"),
    MaskEntry(rule=PatternRule(patterns=URL_PATTERNS), token=LINK_REMOVED_TOKEN),
)


@dataclass(frozen=True)
class KeywordList:
    """A caller-supplied keyword list, compiled into a rule for one call."""

    keywords: tuple[str, ...] = field(default_factory=tuple)

    @property
    def rule(self) -> SubstringRule:
        return SubstringRule(needles=self.keywords)

    def first_match(self, text: str) -> Optional[str]:
        found = self.rule.matches(text)
        return found[0] if found else None
