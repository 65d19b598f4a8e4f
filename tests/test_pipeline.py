# ABOUTME: Tests the end-to-end analysis pipeline and its serialized report.
# ABOUTME: Local runs are deterministic and empty cohorts yield empty structures.

import json
from unittest.mock import Mock

from src.persona_engine.config import PredictionServiceConfig
from src.persona_engine.pipeline import build_client, run_analysis
from src.persona_engine.prediction_client import PredictionClient, PredictionServiceError
from src.persona_engine.schemas import StudentRecord


def _cohort():
    return [
        StudentRecord(name="ana", student_id="1", class_group=7, comprehension=95, focus=90, retention=92, attention=88),
        StudentRecord(name="ben", student_id="2", attention=40, assessment_score=61, engagement_time=30),
        StudentRecord(name="cai", student_id="3", math=70, science=40, english=95),
        StudentRecord(name="dee", student_id="4", comprehension=55, focus=60, retention=58, attention=62),
    ]


def test_empty_cohort():
    result = run_analysis([])
    assert result.students == []
    assert result.statistics.total_students == 0
    assert result.insights.trends == []
    assert result.persona_breakdown == []


def test_local_pipeline_is_idempotent():
    first = run_analysis(_cohort()).to_json()
    second = run_analysis(_cohort()).to_json()
    assert first == second


def test_report_is_json_serializable():
    payload = json.loads(run_analysis(_cohort()).to_json())
    assert len(payload["students"]) == 4
    assert payload["students"][0]["persona"]["type"] in {
        "High Achiever",
        "Steady Learner",
        "Inconsistent Performer",
        "Needs Support",
    }
    assert payload["statistics"]["total_students"] == 4
    assert set(payload["insights"]["correlations"]) == {
        "attention_performance",
        "comprehension_focus",
        "comprehension_retention",
        "focus_retention",
    }


def test_every_student_gets_score_and_persona():
    result = run_analysis(_cohort())
    assert all(s.assessment_score is not None for s in result.students)
    assert all(s.persona is not None for s in result.students)


def test_remote_failure_matches_local_shape():
    client = Mock()
    client.predict_scores.side_effect = PredictionServiceError("unreachable")
    remote = run_analysis(_cohort(), client=client)
    local = run_analysis(_cohort())
    assert remote.to_json() == local.to_json()


def test_build_client_only_when_configured():
    assert build_client(PredictionServiceConfig()) is None
    assert isinstance(build_client(PredictionServiceConfig(base_url="https://x.test")), PredictionClient)
    assert build_client(PredictionServiceConfig(base_url="https://x.test", enabled=False)) is None
