"""Application gate -- maps an evaluation to a review workflow status.

Statuses: ``pending -> {submitted, held_by_ai} -> {approved, rejected}``.

The first transition is computed once, when the application is evaluated:
``submitted`` if the quality score reaches the configured threshold and no
policy risk was found, otherwise ``held_by_ai``. Only ``submitted`` notifies
admins; held applications wait in the hold queue.

Admin review may move an application to ``approved`` or ``rejected`` from
any state, including from one decision to the other.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from edutrust.config import GateConfig
from edutrust.messaging.models import Notification, new_id
from edutrust.scoring.models import AnalysisResult, RiskFlag, TutorApplication
from edutrust.scoring.scorer import evaluate_tutor_application
from edutrust.storage.record_store import APPLICATIONS, NOTIFICATIONS, RecordStore, utc_now
from edutrust.utils.logging import get_logger

logger = get_logger(__name__)


class ApplicationStatus(Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    HELD_BY_AI = "held_by_ai"
    APPROVED = "approved"
    REJECTED = "rejected"


REVIEW_STATUSES = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})


def initial_status(result: AnalysisResult, min_score: int = GateConfig.min_score_for_auto_submit) -> ApplicationStatus:
    """First workflow status for an evaluated application."""
    if result.quality_score >= min_score and not result.has_flag(RiskFlag.POLICY_RISK):
        return ApplicationStatus.SUBMITTED
    return ApplicationStatus.HELD_BY_AI


class ApplicationGate:
    """Evaluates applications, records them and applies admin decisions."""

    def __init__(self, store: RecordStore, config: Optional[GateConfig] = None) -> None:
        self._store = store
        self._config = config or GateConfig()

    @property
    def config(self) -> GateConfig:
        return self._config

    def submit(self, application: TutorApplication | dict, user_id: str = "") -> dict:
        """Evaluate *application*, record it and apply the first transition.

        Returns the stored application record.
        """
        if not isinstance(application, TutorApplication):
            application = TutorApplication.from_dict(application)

        result = evaluate_tutor_application(application)
        status = initial_status(result, self._config.min_score_for_auto_submit)
        now = utc_now()
        submitted = application.to_dict()

        record = {
            "id": new_id("app"),
            "user_id": user_id,
            "status": ApplicationStatus.PENDING.value,
            "quality_score": result.quality_score,
            "dimension_scores": result.dimension_scores.to_dict(),
            "risk_flags": [f.value for f in result.risk_flags],
            "improvement_checklist": list(result.improvement_checklist),
            "auto_summary": result.auto_summary,
            "profile": submitted["profile"],
            "skill_check": submitted["skill_check"],
            "admin_notes": "",
            "created_at": now,
            "updated_at": now,
            "submitted_at": "",
            "reviewed_at": "",
            "reviewed_by": "",
        }

        with self._store.lock:
            self._store.append(APPLICATIONS, record)
            record = self._store.update(
                APPLICATIONS,
                record["id"],
                {"status": status.value, "submitted_at": now, "updated_at": now},
            )
            if status == ApplicationStatus.SUBMITTED:
                self._notify_submitted(record, application.profile.name)

        logger.info(
            "application_gated",
            application_id=record["id"],
            status=status.value,
            quality_score=result.quality_score,
        )
        return record

    def _notify_submitted(self, record: dict, applicant_name: str) -> None:
        name = applicant_name or "An applicant"
        notification = Notification(
            id=new_id("notif"),
            for_role="admin",
            type="application_submitted",
            title="New tutor application",
            message=f"{name} submitted a tutor application (score {record['quality_score']}).",
            payload={
                "application_id": record["id"],
                "applicant_name": applicant_name,
                "quality_score": record["quality_score"],
            },
            created_at=utc_now(),
        )
        self._store.append(NOTIFICATIONS, notification.to_dict())

    def review(
        self,
        application_id: str,
        status: ApplicationStatus | str,
        admin_notes: str = "",
        reviewer_id: str = "",
    ) -> Optional[dict]:
        """Record an admin decision. Returns updated dict or None.

        No terminal-state guard: a decided application can be flipped
        between approved and rejected.
        """
        status = ApplicationStatus(status)
        if status not in REVIEW_STATUSES:
            raise ValueError(f"Review status must be approved or rejected, got {status.value}")

        now = utc_now()
        record = self._store.update(
            APPLICATIONS,
            application_id,
            {
                "status": status.value,
                "admin_notes": admin_notes,
                "reviewed_at": now,
                "reviewed_by": reviewer_id,
                "updated_at": now,
            },
        )
        if record is not None:
            logger.info("application_reviewed", application_id=application_id, status=status.value)
        return record

    def get(self, application_id: str) -> Optional[dict]:
        return self._store.get(APPLICATIONS, application_id)

    def list_applications(self, status: ApplicationStatus | str | None = None) -> list[dict]:
        """Return all applications, optionally filtered by status."""
        value = ApplicationStatus(status).value if status is not None else None
        return self._store.list(APPLICATIONS, status=value)

    def hold_queue(self) -> list[dict]:
        """Applications the gate held for manual review."""
        return self.list_applications(ApplicationStatus.HELD_BY_AI)
