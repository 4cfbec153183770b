"""Tutor application scoring.

Five capped sub-scores (completeness, availability, subject fit,
micro-teaching, policy compliance) are summed into a 0-100 quality score;
risk flags, an improvement checklist and a summary band are derived from
them.
"""

from edutrust.scoring.models import (
    AnalysisResult,
    ApplicationProfile,
    Availability,
    DimensionScores,
    RiskFlag,
    SkillCheckAnswers,
    SubScores,
    TutorApplication,
)
from edutrust.scoring.policy import DEFAULT_SCORING_POLICY, ScoringPolicy
from edutrust.scoring.scorer import evaluate_tutor_application

__all__ = [
    "AnalysisResult",
    "ApplicationProfile",
    "Availability",
    "DEFAULT_SCORING_POLICY",
    "DimensionScores",
    "RiskFlag",
    "ScoringPolicy",
    "SkillCheckAnswers",
    "SubScores",
    "TutorApplication",
    "evaluate_tutor_application",
]
