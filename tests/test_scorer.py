"""Tests for the tutor application scorer."""

import pytest

from edutrust.applications.gate import ApplicationStatus, initial_status
from edutrust.scoring.models import ApplicationProfile, RiskFlag, SkillCheckAnswers, TutorApplication
from edutrust.scoring.policy import DEFAULT_SCORING_POLICY, Tier, TierLadder
from edutrust.scoring.scorer import (
    evaluate_tutor_application,
    percent,
    score_availability,
    score_completeness,
    score_micro_teaching,
    score_subject_fit,
)


def test_complete_application_scores_high(complete_application):
    result = evaluate_tutor_application(complete_application)

    assert result.sub_scores.completeness == 20
    assert result.sub_scores.availability == 15
    assert result.sub_scores.subject_fit == 10
    assert result.sub_scores.micro_teaching == 35
    assert result.sub_scores.policy_compliance == 10
    assert result.quality_score == 90
    assert result.risk_flags == ()
    assert result.improvement_checklist == ()
    assert result.auto_summary.startswith("Excellent candidate")
    assert initial_status(result) == ApplicationStatus.SUBMITTED


def test_dimension_scores_are_percentages(complete_application):
    dims = evaluate_tutor_application(complete_application).dimension_scores
    assert dims.clarity == 100
    assert dims.structure == 100
    assert dims.empathy == 100
    assert dims.communication == 100
    assert dims.subject_fit == 100
    assert dims.reliability == 100
    assert dims.policy_compliance == 100
    assert dims.availability == 100


def test_email_in_answer_forces_policy_risk(complete_application):
    answers = complete_application["skill_check"]["micro_teaching_answers"]
    answers["q2"] = answers["q2"].replace("steps together", "steps with jane.doe@example.com together")

    result = evaluate_tutor_application(complete_application)

    assert result.sub_scores.policy_compliance == 0
    assert result.dimension_scores.policy_compliance == 0
    assert RiskFlag.POLICY_RISK in result.risk_flags
    assert result.quality_score == 80
    assert initial_status(result) == ApplicationStatus.HELD_BY_AI


def test_contact_details_in_bio_count(complete_application):
    complete_application["profile"]["bio"] = "Find me on instagram for more."
    result = evaluate_tutor_application(complete_application)
    assert result.has_flag(RiskFlag.POLICY_RISK)


def test_sparse_profile_flags_low_availability():
    application = {
        "profile": {
            "name": "Sam",
            "country": "Kenya",
            "timezone": "Africa/Nairobi",
            "languages": ["English"],
            "subjects": [],
            "grades_supported": [],
            "teaching_style_tags": ["hands-on"],
            "availability": {"days": ["sat"], "slots": ["morning"]},
        },
    }
    result = evaluate_tutor_application(application)

    assert result.sub_scores.completeness <= 12
    assert result.sub_scores.availability <= 4
    assert RiskFlag.LOW_AVAILABILITY in result.risk_flags
    assert RiskFlag.MISSING_PROFILE_FIELDS in result.risk_flags


def test_empty_application_is_scored_not_rejected():
    for application in (None, {}, {"profile": None, "skill_check": None}):
        result = evaluate_tutor_application(application)
        assert result.quality_score == 10  # compliance only
        assert result.risk_flags == (
            RiskFlag.LOW_AVAILABILITY,
            RiskFlag.WEAK_DEMO,
            RiskFlag.MISSING_PROFILE_FIELDS,
        )
        assert result.auto_summary == DEFAULT_SCORING_POLICY.fallback_summary


def test_checklist_is_flags_then_empathy_in_order():
    result = evaluate_tutor_application(TutorApplication())
    suggestions = DEFAULT_SCORING_POLICY.flag_suggestions
    assert result.improvement_checklist == (
        suggestions[RiskFlag.LOW_AVAILABILITY],
        suggestions[RiskFlag.WEAK_DEMO],
        suggestions[RiskFlag.MISSING_PROFILE_FIELDS],
        DEFAULT_SCORING_POLICY.empathy_suggestion,
    )


def test_checklist_is_capped_at_five():
    application = TutorApplication(skill_check=SkillCheckAnswers(q1="call me at 555-123-4567"))
    result = evaluate_tutor_application(application)
    assert len(result.risk_flags) == 4
    assert len(result.improvement_checklist) == 5
    assert result.improvement_checklist[-1] == DEFAULT_SCORING_POLICY.empathy_suggestion


def test_camel_case_input_is_accepted():
    application = {
        "profile": {
            "firstName": "Ana",
            "gradesSupported": ["5"],
            "teachingStyleTags": ["visual"],
            "experienceLevel": "1-2 years",
            "shortBio": "Reach me at ana@mail.com",
        },
        "skillCheck": {"microTeachingAnswers": {"q1": "First, explain."}},
    }
    parsed = TutorApplication.from_dict(application)
    assert parsed.profile.name == "Ana"
    assert parsed.profile.grades_supported == ("5",)
    assert parsed.skill_check.q1 == "First, explain."
    assert evaluate_tutor_application(parsed).has_flag(RiskFlag.POLICY_RISK)


def test_completeness_checklist():
    assert score_completeness(ApplicationProfile()) == 0
    assert score_completeness(ApplicationProfile(name="A")) == 0
    assert score_completeness(ApplicationProfile(name="Al", subjects=("Maths",))) == 5


def test_availability_tiers_use_distinct_values():
    profile = ApplicationProfile.from_dict(
        {"availability": {"days": ["mon", "mon", "mon"], "slots": ["am", "pm"]}}
    )
    assert score_availability(profile) == 2 + 4


def test_subject_fit_tiers():
    profile = ApplicationProfile(subjects=("a", "b"), grades_supported=("1",))
    assert score_subject_fit(profile) == 3 + 2


def test_micro_teaching_families_clamp_independently():
    answer = "First the student. Explain gently and understand."  # 49 chars
    score, families = score_micro_teaching(SkillCheckAnswers(q1=answer, q2=answer, q3=answer))
    assert families == {"clarity": 12, "structure": 12, "empathy": 8, "communication": 6}
    assert score == 35


def test_percent_rounds_half_up():
    assert percent(5, 8) == 63
    assert percent(3, 8) == 38
    assert percent(0, 12) == 0
    assert percent(12, 12) == 100


def test_tier_ladder():
    ladder = TierLadder(tiers=(Tier(1, 2), Tier(5, 8), Tier(3, 5)))
    assert [ladder.points_for(n) for n in (0, 1, 3, 4, 5, 9)] == [0, 2, 5, 5, 8, 8]


def test_summary_bands():
    policy = DEFAULT_SCORING_POLICY
    assert policy.summary_for(90).startswith("Excellent")
    assert policy.summary_for(80).startswith("Strong")
    assert policy.summary_for(70).startswith("Meets")
    assert policy.summary_for(50).startswith("Needs")
    assert policy.summary_for(49) == policy.fallback_summary


@pytest.mark.parametrize(
    "application",
    [
        {"profile": {"availability": ["mon"]}},
        {"profile": {"subjects": 3, "grades_supported": 7.5}},
        {"profile": {"languages": True, "teaching_style_tags": {"visual": 1}}},
        {"profile": "Jane"},
        {"profile": ["Jane"], "skill_check": "First, explain."},
        {"skill_check": {"micro_teaching_answers": ["a", "b"], "q1": ["x"]}},
        "not an application",
    ],
)
def test_malformed_shapes_score_as_empty(application):
    result = evaluate_tutor_application(application)
    assert result.quality_score == 10
    assert RiskFlag.MISSING_PROFILE_FIELDS in result.risk_flags


def test_junk_list_items_are_dropped():
    profile = ApplicationProfile.from_dict(
        {"subjects": ["Maths", None, "", {"x": 1}, 7], "availability": {"days": "mon", "slots": False}}
    )
    assert profile.subjects == ("Maths", "7")
    assert profile.availability.days == ("mon",)
    assert profile.availability.slots == ()
