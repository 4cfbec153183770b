"""Tests for text rule kinds and the shared rule table."""

import re

from edutrust.policy.models import Severity, ViolationType
from edutrust.policy.rules import (
    RULE_TABLE,
    KeywordList,
    LengthBandRule,
    PatternRule,
    RuleKind,
    SentenceCountBandRule,
    SubstringRule,
    count_sentences,
)


def test_substring_rule_is_case_insensitive_and_ordered():
    rule = SubstringRule(needles=("zoom", "Skype", "signal"))
    assert rule.kind == RuleKind.SUBSTRING
    assert rule.matches("Use SKYPE or zoom") == ["zoom", "Skype"]
    assert rule.matches("") == []
    assert not rule.hit("nothing here")


def test_pattern_rule_digit_guard():
    rule = PatternRule(patterns=(re.compile(r"\d[\d-]*\d"),), min_digits=7)
    assert rule.matches("code 12-34 and 555-123-4567") == ["555-123-4567"]


def test_pattern_rule_exclusion():
    rule = PatternRule(patterns=(re.compile(r"\S+\.com"),), exclude=("edubridge",))
    assert rule.matches("EduBridge.com and other.com") == ["other.com"]


def test_length_band_rule():
    rule = LengthBandRule(5, 10)
    assert rule.hit("hello")
    assert rule.hit("0123456789")
    assert not rule.hit("hey")
    assert not rule.hit("this is far too long")
    assert LengthBandRule(3, None).hit("x" * 1000)


def test_sentence_count_band_rule():
    assert count_sentences("One. Two! Three?") == 3
    assert count_sentences("...   !!") == 0
    assert count_sentences("No terminator") == 1
    rule = SentenceCountBandRule(2, 5)
    assert rule.hit("One. Two.")
    assert not rule.hit("Only one.")
    assert not rule.hit("A. B. C. D. E. F.")


def test_keyword_list_first_match_follows_list_order():
    keywords = KeywordList(("phone", "dm"))
    assert keywords.first_match("DM me your phone") == "phone"
    assert keywords.first_match("hello") is None


def test_rule_table_covers_every_category_once():
    categories = [e.category for e in RULE_TABLE]
    assert sorted(c.value for c in categories) == sorted(c.value for c in ViolationType)
    assert len(categories) == len(set(categories))


def test_rule_table_severity_and_redaction():
    by_category = {e.category: e for e in RULE_TABLE}
    assert by_category[ViolationType.PHONE_NUMBER].severity == Severity.HIGH
    assert by_category[ViolationType.EMAIL].severity == Severity.HIGH
    assert by_category[ViolationType.EXTERNAL_LINK].severity == Severity.MEDIUM
    assert by_category[ViolationType.PLATFORM_MENTION].severity == Severity.MEDIUM
    assert by_category[ViolationType.OFF_PLATFORM_REQUEST].severity == Severity.HIGH
    assert by_category[ViolationType.PLATFORM_MENTION].redaction is None
    assert by_category[ViolationType.OFF_PLATFORM_REQUEST].redaction is None
    assert by_category[ViolationType.EXTERNAL_LINK].redaction == "[link removed]"
