# ABOUTME: Attaches resolved scores and personas to student records.
# ABOUTME: Tries remote predictions first and falls back to local scoring per batch.

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from .personas import classify_persona
from .prediction_client import PredictionClient
from .schemas import EnrichedStudent, StudentRecord
from .scoring import resolve_assessment_score, round_half_up

logger = logging.getLogger(__name__)


def enrich_student(record: StudentRecord, predicted_score: Optional[float] = None) -> EnrichedStudent:
    """
    Resolve the score (authoritative > predicted > local) and classify the persona.
    """

    if record.assessment_score is not None:
        score = record.assessment_score
    elif predicted_score is not None:
        score = round_half_up(predicted_score)
    else:
        score = resolve_assessment_score(record)
    return EnrichedStudent.from_record(record, score, classify_persona(score, record))


class StudentClassifier(Protocol):
    def classify(self, students: Sequence[StudentRecord]) -> List[EnrichedStudent]:
        ...


class LocalClassifier:
    """Scores and classifies every student with the local resolver."""

    def classify(self, students: Sequence[StudentRecord]) -> List[EnrichedStudent]:
        return [enrich_student(s) for s in students]


class RemoteClassifier:
    """Uses batch predictions from the prediction service where scores are missing."""

    def __init__(self, client: PredictionClient):
        self.client = client

    def classify(self, students: Sequence[StudentRecord]) -> List[EnrichedStudent]:
        predictions = self.client.predict_scores(students)
        logger.info("Received %d predicted scores for %d students", sum(p is not None for p in predictions), len(students))
        return [enrich_student(s, p) for s, p in zip(students, predictions)]


class ResilientClassifier:
    """
    Runs the primary classifier and substitutes the fallback for the whole
    batch when the primary raises.
    """

    def __init__(self, primary: StudentClassifier, fallback: Optional[StudentClassifier] = None):
        self.primary = primary
        self.fallback = fallback or LocalClassifier()

    def classify(self, students: Sequence[StudentRecord]) -> List[EnrichedStudent]:
        try:
            return self.primary.classify(students)
        except Exception as exc:
            logger.warning("Remote prediction failed, using local persona scoring: %s", exc)
            return self.fallback.classify(students)


def cluster_students(
    students: Sequence[StudentRecord], client: Optional[PredictionClient] = None
) -> List[EnrichedStudent]:
    """Enrich students, using the prediction service when a client is given."""

    if client is None:
        return LocalClassifier().classify(students)
    return ResilientClassifier(RemoteClassifier(client)).classify(students)
