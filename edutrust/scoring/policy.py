"""Declarative scoring policy for tutor applications.

All weights, caps, tiers and thresholds used by the scorer live here, so
the algorithm in ``scorer.py`` carries no magic numbers.

Composite score (capped at 100) is the sum of five capped sub-scores:

==================  ===  ==================================================
Sub-score           Cap  Rule
==================  ===  ==================================================
completeness         20  fixed checklist over profile field presence
availability         15  tiers on distinct days + tiers on distinct slots
subject_fit          10  tiers on subject count + tiers on grade count
micro_teaching       35  keyword / length / sentence heuristics per answer
policy_compliance    10  all or nothing, via the policy engine
==================  ===  ==================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from edutrust.policy.rules import LengthBandRule, SentenceCountBandRule, SubstringRule, TextRule
from edutrust.scoring.models import ApplicationProfile, RiskFlag


@dataclass(frozen=True)
class Tier:
    minimum: int
    points: int


@dataclass(frozen=True)
class TierLadder:
    """Awards the points of the highest tier a count reaches."""

    tiers: tuple[Tier, ...]

    def points_for(self, count: int) -> int:
        for tier in sorted(self.tiers, key=lambda t: t.minimum, reverse=True):
            if count >= tier.minimum:
                return tier.points
        return 0


@dataclass(frozen=True)
class FieldCheck:
    """One completeness checklist item."""

    name: str
    points: int
    present: Callable[[ApplicationProfile], bool]


@dataclass(frozen=True)
class AnswerRule:
    """A micro-teaching heuristic applied to each answer independently.

    ``choices`` are tried in order; the first rule that hits awards its
    points to ``family``.
    """

    family: str
    choices: tuple[tuple[TextRule, int], ...]

    def points_for(self, answer: str) -> int:
        for rule, points in self.choices:
            if rule.hit(answer):
                return points
        return 0


@dataclass(frozen=True)
class SummaryBand:
    minimum: int
    text: str


STEP_KEYWORDS = ("first", "then", "step 1", "step 2", "1.", "2.", "1)", "2)", "next", "finally", "after that")
STUDENT_FOCUSED_KEYWORDS = ("student", "child", "they", "them", "learner", "their", "kid", "pupil")
ACTION_KEYWORDS = (
    "explain", "show", "demonstrate", "ask", "check", "practice",
    "review", "help", "guide", "break down", "simplify",
)
RESPECTFUL_KEYWORDS = (
    "gently", "calmly", "patiently", "kindly", "respectfully",
    "understanding", "supportive", "encourage",
)
EMPATHY_KEYWORDS = (
    "understand", "feel", "struggle", "challenge", "difficult",
    "okay", "normal", "patience", "time", "support",
)

CLARITY = "clarity"
STRUCTURE = "structure"
EMPATHY = "empathy"
COMMUNICATION = "communication"


@dataclass(frozen=True)
class ScoringPolicy:
    """Every tunable of the application scorer."""

    completeness_cap: int
    availability_cap: int
    subject_fit_cap: int
    micro_teaching_cap: int
    policy_compliance_points: int
    total_cap: int

    completeness_checks: tuple[FieldCheck, ...]
    day_tiers: TierLadder
    slot_tiers: TierLadder
    subject_tiers: TierLadder
    grade_tiers: TierLadder

    answer_rules: tuple[AnswerRule, ...]
    family_caps: dict[str, int]

    low_availability_below: int
    weak_demo_below: int
    missing_fields_below: int
    empathy_percent_below: int

    flag_suggestions: dict[RiskFlag, str]
    empathy_suggestion: str
    checklist_limit: int

    summary_bands: tuple[SummaryBand, ...]
    fallback_summary: str

    family_order: tuple[str, ...] = field(default=(CLARITY, STRUCTURE, EMPATHY, COMMUNICATION))

    def summary_for(self, score: int) -> str:
        for band in sorted(self.summary_bands, key=lambda b: b.minimum, reverse=True):
            if score >= band.minimum:
                return band.text
        return self.fallback_summary


_COUNT_TIERS = TierLadder(tiers=(Tier(3, 5), Tier(2, 3), Tier(1, 2)))

DEFAULT_SCORING_POLICY = ScoringPolicy(
    completeness_cap=20,
    availability_cap=15,
    subject_fit_cap=10,
    micro_teaching_cap=35,
    policy_compliance_points=10,
    total_cap=100,
    completeness_checks=(
        FieldCheck("name", 2, lambda p: len(p.name or "") >= 2),
        FieldCheck("country", 2, lambda p: bool(p.country)),
        FieldCheck("timezone", 2, lambda p: bool(p.timezone)),
        FieldCheck("languages", 2, lambda p: len(p.languages) > 0),
        FieldCheck("subjects", 3, lambda p: len(p.subjects) > 0),
        FieldCheck("grades_supported", 3, lambda p: len(p.grades_supported) > 0),
        FieldCheck("experience_level", 2, lambda p: bool(p.experience_level)),
        FieldCheck("teaching_style_tags", 2, lambda p: len(p.teaching_style_tags) > 0),
        FieldCheck(
            "availability",
            2,
            lambda p: len(p.availability.days) > 0 and len(p.availability.slots) > 0,
        ),
    ),
    day_tiers=TierLadder(tiers=(Tier(5, 8), Tier(3, 5), Tier(1, 2))),
    slot_tiers=TierLadder(tiers=(Tier(3, 7), Tier(2, 4), Tier(1, 2))),
    subject_tiers=_COUNT_TIERS,
    grade_tiers=_COUNT_TIERS,
    answer_rules=(
        AnswerRule(STRUCTURE, ((SubstringRule(STEP_KEYWORDS), 4),)),
        AnswerRule(CLARITY, ((SubstringRule(STUDENT_FOCUSED_KEYWORDS), 3),)),
        AnswerRule(CLARITY, ((SubstringRule(ACTION_KEYWORDS), 2),)),
        AnswerRule(EMPATHY, ((SubstringRule(RESPECTFUL_KEYWORDS), 3),)),
        AnswerRule(EMPATHY, ((SubstringRule(EMPATHY_KEYWORDS), 2),)),
        AnswerRule(
            COMMUNICATION,
            ((LengthBandRule(100, 280), 3), (LengthBandRule(50, None), 2)),
        ),
        AnswerRule(COMMUNICATION, ((SentenceCountBandRule(2, 5), 2),)),
    ),
    family_caps={CLARITY: 12, STRUCTURE: 12, EMPATHY: 8, COMMUNICATION: 10},
    low_availability_below=5,
    weak_demo_below=15,
    missing_fields_below=15,
    empathy_percent_below=50,
    flag_suggestions={
        RiskFlag.LOW_AVAILABILITY: "Add more available days and time slots to increase your chances",
        RiskFlag.WEAK_DEMO: "Include step-by-step explanations in your teaching answers",
        RiskFlag.MISSING_PROFILE_FIELDS: "Complete all profile fields including subjects and grades",
        RiskFlag.POLICY_RISK: "Remove any contact information or external platform references",
    },
    empathy_suggestion="Show more empathy and patience in your teaching approach",
    checklist_limit=5,
    summary_bands=(
        SummaryBand(90, "Excellent candidate with strong teaching skills and high availability."),
        SummaryBand(80, "Strong candidate with good teaching methodology and communication."),
        SummaryBand(70, "Meets requirements with room for improvement in some areas."),
        SummaryBand(50, "Needs improvement in teaching demonstrations and/or availability."),
    ),
    fallback_summary="Application requires significant improvements before review.",
)
