"""Tests for the application gate workflow."""

import tempfile

import pytest

from edutrust.applications.gate import ApplicationGate, ApplicationStatus, initial_status
from edutrust.config import GateConfig
from edutrust.scoring.models import AnalysisResult, DimensionScores, RiskFlag
from edutrust.storage.record_store import APPLICATIONS, NOTIFICATIONS, RecordStore


def _result(score: int, *flags: RiskFlag) -> AnalysisResult:
    return AnalysisResult(quality_score=score, dimension_scores=DimensionScores(), risk_flags=flags)


def test_threshold_boundary():
    assert initial_status(_result(70)) == ApplicationStatus.SUBMITTED
    assert initial_status(_result(69)) == ApplicationStatus.HELD_BY_AI


def test_policy_risk_holds_regardless_of_score():
    assert initial_status(_result(100, RiskFlag.POLICY_RISK)) == ApplicationStatus.HELD_BY_AI


def test_other_flags_do_not_hold():
    assert initial_status(_result(75, RiskFlag.WEAK_DEMO)) == ApplicationStatus.SUBMITTED


def test_threshold_is_configurable():
    assert initial_status(_result(75), min_score=80) == ApplicationStatus.HELD_BY_AI


def test_submit_notifies_admins(complete_application):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RecordStore(tmpdir)
        gate = ApplicationGate(store)

        record = gate.submit(complete_application, user_id="user_1")

        assert record["status"] == "submitted"
        assert record["quality_score"] == 90
        assert record["submitted_at"] != ""
        assert store.get(APPLICATIONS, record["id"])["status"] == "submitted"

        notifications = store.list(NOTIFICATIONS)
        assert len(notifications) == 1
        assert notifications[0]["for_role"] == "admin"
        assert notifications[0]["type"] == "application_submitted"
        assert "Priya" in notifications[0]["message"]
        assert "90" in notifications[0]["message"]


def test_held_application_is_silent(complete_application):
    complete_application["skill_check"]["micro_teaching_answers"]["q1"] += " Text me later."
    with tempfile.TemporaryDirectory() as tmpdir:
        store = RecordStore(tmpdir)
        gate = ApplicationGate(store)

        record = gate.submit(complete_application)

        assert record["status"] == "held_by_ai"
        assert "policy_risk" in record["risk_flags"]
        assert store.list(NOTIFICATIONS) == []
        assert [r["id"] for r in gate.hold_queue()] == [record["id"]]


def test_gate_uses_injected_threshold(complete_application):
    with tempfile.TemporaryDirectory() as tmpdir:
        gate = ApplicationGate(RecordStore(tmpdir), GateConfig(min_score_for_auto_submit=95))
        assert gate.submit(complete_application)["status"] == "held_by_ai"


def test_review_overwrites_notes_and_allows_flip(complete_application):
    with tempfile.TemporaryDirectory() as tmpdir:
        gate = ApplicationGate(RecordStore(tmpdir))
        app_id = gate.submit(complete_application)["id"]

        approved = gate.review(app_id, "approved", admin_notes="Great demo", reviewer_id="admin_1")
        assert approved["status"] == "approved"
        assert approved["admin_notes"] == "Great demo"
        assert approved["reviewed_by"] == "admin_1"
        first_review = approved["reviewed_at"]
        assert first_review

        rejected = gate.review(app_id, ApplicationStatus.REJECTED, admin_notes="Changed mind")
        assert rejected["status"] == "rejected"
        assert rejected["admin_notes"] == "Changed mind"
        assert rejected["reviewed_at"] >= first_review

        assert gate.list_applications("rejected")[0]["id"] == app_id
        assert gate.list_applications(ApplicationStatus.APPROVED) == []


def test_review_rejects_non_decision_status(complete_application):
    with tempfile.TemporaryDirectory() as tmpdir:
        gate = ApplicationGate(RecordStore(tmpdir))
        app_id = gate.submit(complete_application)["id"]
        with pytest.raises(ValueError):
            gate.review(app_id, "submitted")
        with pytest.raises(ValueError):
            gate.review(app_id, "archived")


def test_review_unknown_application():
    with tempfile.TemporaryDirectory() as tmpdir:
        gate = ApplicationGate(RecordStore(tmpdir))
        assert gate.review("app_missing", "approved") is None
