"""Models for tutor applications and their evaluation.

Applications arrive as loosely-shaped mappings (JSON or YAML from a form).
``from_dict`` accepts both snake_case and camelCase keys and treats any
missing or null field as empty, so partially filled applications still
score instead of failing.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _strings(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(s for s in (_text(v) for v in value) if s)


def _pick(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class Availability:
    days: tuple[str, ...] = ()
    slots: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Availability:
        data = _mapping(data)
        return cls(days=_strings(data.get("days")), slots=_strings(data.get("slots")))


@dataclass(frozen=True)
class ApplicationProfile:
    """Structured profile fields of a tutor application."""

    name: str = ""
    country: str = ""
    timezone: str = ""
    languages: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()
    grades_supported: tuple[str, ...] = ()
    experience_level: str = ""
    teaching_style_tags: tuple[str, ...] = ()
    availability: Availability = field(default_factory=Availability)
    bio: Optional[str] = None
    video_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> ApplicationProfile:
        data = _mapping(data)
        bio = _pick(data, "bio", "short_bio", "shortBio")
        video = _pick(data, "video_url", "intro_video_url", "introVideoUrl", "videoUrl")
        return cls(
            name=_text(_pick(data, "name", "first_name", "firstName")),
            country=_text(data.get("country")),
            timezone=_text(data.get("timezone")),
            languages=_strings(data.get("languages")),
            subjects=_strings(data.get("subjects")),
            grades_supported=_strings(_pick(data, "grades_supported", "gradesSupported", "grades")),
            experience_level=_text(_pick(data, "experience_level", "experienceLevel")),
            teaching_style_tags=_strings(_pick(data, "teaching_style_tags", "teachingStyleTags")),
            availability=Availability.from_dict(data.get("availability")),
            bio=None if bio is None else _text(bio),
            video_url=None if video is None else _text(video),
        )


@dataclass(frozen=True)
class SkillCheckAnswers:
    """The three free-text micro-teaching answers."""

    q1: str = ""
    q2: str = ""
    q3: str = ""

    @property
    def answers(self) -> tuple[str, str, str]:
        return (self.q1 or "", self.q2 or "", self.q3 or "")

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> SkillCheckAnswers:
        data = _mapping(data)
        nested = _pick(data, "micro_teaching_answers", "microTeachingAnswers")
        if isinstance(nested, dict):
            data = nested
        return cls(
            q1=_text(data.get("q1")),
            q2=_text(data.get("q2")),
            q3=_text(data.get("q3")),
        )


@dataclass(frozen=True)
class TutorApplication:
    profile: ApplicationProfile = field(default_factory=ApplicationProfile)
    skill_check: SkillCheckAnswers = field(default_factory=SkillCheckAnswers)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> TutorApplication:
        data = _mapping(data)
        return cls(
            profile=ApplicationProfile.from_dict(data.get("profile")),
            skill_check=SkillCheckAnswers.from_dict(_pick(data, "skill_check", "skillCheck")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RiskFlag(Enum):
    LOW_AVAILABILITY = "low_availability"
    WEAK_DEMO = "weak_demo"
    MISSING_PROFILE_FIELDS = "missing_profile_fields"
    POLICY_RISK = "policy_risk"


@dataclass(frozen=True)
class DimensionScores:
    """Reviewer-facing percentages (0-100), one per dimension."""

    clarity: int = 0
    structure: int = 0
    empathy: int = 0
    communication: int = 0
    subject_fit: int = 0
    reliability: int = 0
    policy_compliance: int = 0
    availability: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class SubScores:
    """Raw capped points that feed the composite score."""

    completeness: int = 0
    availability: int = 0
    subject_fit: int = 0
    micro_teaching: int = 0
    policy_compliance: int = 0

    @property
    def total(self) -> int:
        return (
            self.completeness
            + self.availability
            + self.subject_fit
            + self.micro_teaching
            + self.policy_compliance
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class AnalysisResult:
    """Evaluation of one tutor application."""

    quality_score: int
    dimension_scores: DimensionScores
    risk_flags: tuple[RiskFlag, ...] = ()
    improvement_checklist: tuple[str, ...] = ()
    auto_summary: str = ""
    sub_scores: SubScores = field(default_factory=SubScores)

    def has_flag(self, flag: RiskFlag) -> bool:
        return flag in self.risk_flags

    def to_dict(self) -> dict[str, Any]:
        return {
            "quality_score": self.quality_score,
            "dimension_scores": self.dimension_scores.to_dict(),
            "risk_flags": [f.value for f in self.risk_flags],
            "improvement_checklist": list(self.improvement_checklist),
            "auto_summary": self.auto_summary,
            "sub_scores": self.sub_scores.to_dict(),
        }
