"""Scorer -- evaluates tutor applications against the scoring policy.

Deterministic and side-effect free apart from the policy engine call used
for the compliance sub-score. Missing fields simply contribute nothing.
"""

from __future__ import annotations

from typing import Optional

from edutrust.policy.engine import check_policy
from edutrust.scoring.models import (
    AnalysisResult,
    ApplicationProfile,
    DimensionScores,
    RiskFlag,
    SkillCheckAnswers,
    SubScores,
    TutorApplication,
)
from edutrust.scoring.policy import (
    CLARITY,
    COMMUNICATION,
    DEFAULT_SCORING_POLICY,
    EMPATHY,
    STRUCTURE,
    ScoringPolicy,
)
from edutrust.utils.logging import get_logger

logger = get_logger(__name__)


def percent(value: int, cap: int) -> int:
    """``value / cap`` as a whole percentage, rounding halves up."""
    if cap <= 0:
        return 0
    return (value * 200 + cap) // (2 * cap)


def score_completeness(profile: ApplicationProfile, policy: ScoringPolicy = DEFAULT_SCORING_POLICY) -> int:
    score = sum(check.points for check in policy.completeness_checks if check.present(profile))
    return min(score, policy.completeness_cap)


def score_availability(profile: ApplicationProfile, policy: ScoringPolicy = DEFAULT_SCORING_POLICY) -> int:
    days = len(set(profile.availability.days))
    slots = len(set(profile.availability.slots))
    score = policy.day_tiers.points_for(days) + policy.slot_tiers.points_for(slots)
    return min(score, policy.availability_cap)


def score_subject_fit(profile: ApplicationProfile, policy: ScoringPolicy = DEFAULT_SCORING_POLICY) -> int:
    score = policy.subject_tiers.points_for(len(profile.subjects)) + policy.grade_tiers.points_for(
        len(profile.grades_supported)
    )
    return min(score, policy.subject_fit_cap)


def score_micro_teaching(
    skill_check: SkillCheckAnswers, policy: ScoringPolicy = DEFAULT_SCORING_POLICY
) -> tuple[int, dict[str, int]]:
    """Return the capped micro-teaching score and the clamped family totals."""
    families = {name: 0 for name in policy.family_order}

    for answer in skill_check.answers:
        for rule in policy.answer_rules:
            families[rule.family] += rule.points_for(answer)

    clamped = {name: min(total, policy.family_caps[name]) for name, total in families.items()}
    score = min(sum(clamped.values()), policy.micro_teaching_cap)
    return score, clamped


def score_policy_compliance(
    application: TutorApplication, policy: ScoringPolicy = DEFAULT_SCORING_POLICY
) -> tuple[int, bool]:
    """Return the compliance score and whether any field was blocked."""
    texts = list(application.skill_check.answers)
    texts.append(application.profile.bio or "")

    for text in texts:
        if check_policy(text).blocked:
            return 0, True
    return policy.policy_compliance_points, False


def evaluate_tutor_application(
    application: Optional[TutorApplication | dict],
    policy: ScoringPolicy = DEFAULT_SCORING_POLICY,
) -> AnalysisResult:
    """Score an application and derive flags, checklist and summary.

    Accepts a ``TutorApplication`` or the raw mapping it was submitted as.
    """
    if not isinstance(application, TutorApplication):
        application = TutorApplication.from_dict(application)
    profile = application.profile

    completeness = score_completeness(profile, policy)
    availability = score_availability(profile, policy)
    subject_fit = score_subject_fit(profile, policy)
    micro_teaching, families = score_micro_teaching(application.skill_check, policy)
    compliance, has_violation = score_policy_compliance(application, policy)

    sub_scores = SubScores(
        completeness=completeness,
        availability=availability,
        subject_fit=subject_fit,
        micro_teaching=micro_teaching,
        policy_compliance=compliance,
    )
    total = min(sub_scores.total, policy.total_cap)

    caps = policy.family_caps
    dimensions = DimensionScores(
        clarity=percent(families[CLARITY], caps[CLARITY]),
        structure=percent(families[STRUCTURE], caps[STRUCTURE]),
        empathy=percent(families[EMPATHY], caps[EMPATHY]),
        communication=percent(families[COMMUNICATION], caps[COMMUNICATION]),
        subject_fit=percent(subject_fit, policy.subject_fit_cap),
        reliability=percent(completeness, policy.completeness_cap),
        policy_compliance=percent(compliance, policy.policy_compliance_points),
        availability=percent(availability, policy.availability_cap),
    )

    flags: list[RiskFlag] = []
    if availability < policy.low_availability_below:
        flags.append(RiskFlag.LOW_AVAILABILITY)
    if micro_teaching < policy.weak_demo_below:
        flags.append(RiskFlag.WEAK_DEMO)
    if completeness < policy.missing_fields_below:
        flags.append(RiskFlag.MISSING_PROFILE_FIELDS)
    if has_violation:
        flags.append(RiskFlag.POLICY_RISK)

    checklist = [policy.flag_suggestions[f] for f in flags]
    if dimensions.empathy < policy.empathy_percent_below:
        checklist.append(policy.empathy_suggestion)

    result = AnalysisResult(
        quality_score=total,
        dimension_scores=dimensions,
        risk_flags=tuple(flags),
        improvement_checklist=tuple(checklist[: policy.checklist_limit]),
        auto_summary=policy.summary_for(total),
        sub_scores=sub_scores,
    )
    logger.info(
        "application_evaluated",
        quality_score=total,
        risk_flags=[f.value for f in flags],
    )
    return result
