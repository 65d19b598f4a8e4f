# ABOUTME: Assigns one of four learning personas from a score and raw attributes.
# ABOUTME: Rules are an ordered (predicate, persona) table evaluated first-match-wins.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import numpy as np

from .schemas import COGNITIVE_TRIPLET, LEGACY_TRIPLET, LearningPersona, PersonaType, StudentRecord


class PersonaThresholds:
    HIGH_ACHIEVER_SCORE = 85
    # Written for a 0-10 attention scale while current attention is 0-100.
    # Kept literal for compatibility; suspected unit mismatch.
    HIGH_ACHIEVER_ATTENTION = 7.5
    STEADY_SCORE = 70
    STEADY_MAX_SPREAD = 10
    INCONSISTENT_MIN_SPREAD = 15
    INCONSISTENT_ATTENTION = 6
    INCONSISTENT_SCORE = 60
    LOW_ENGAGEMENT_MINUTES = 50


PERSONAS: Dict[PersonaType, LearningPersona] = {
    PersonaType.HIGH_ACHIEVER: LearningPersona(
        type=PersonaType.HIGH_ACHIEVER,
        description="Consistently excellent performance across all subjects with high attention levels",
        recommendations=(
            "Provide advanced challenges and enrichment activities",
            "Consider leadership roles in group projects",
            "Explore accelerated learning opportunities",
        ),
    ),
    PersonaType.STEADY_LEARNER: LearningPersona(
        type=PersonaType.STEADY_LEARNER,
        description="Consistent performance with steady progress across subjects",
        recommendations=(
            "Maintain current learning pace with gradual challenges",
            "Focus on skill development in specific areas",
            "Encourage peer collaboration",
        ),
    ),
    PersonaType.INCONSISTENT_PERFORMER: LearningPersona(
        type=PersonaType.INCONSISTENT_PERFORMER,
        description="Shows potential but performance varies significantly across subjects",
        recommendations=(
            "Identify and address attention-related challenges",
            "Provide consistent study routines and structure",
            "Focus on strengths while supporting weaker areas",
        ),
    ),
    PersonaType.NEEDS_SUPPORT: LearningPersona(
        type=PersonaType.NEEDS_SUPPORT,
        description="Requires additional support and intervention to improve performance",
        recommendations=(
            "Implement individualized learning plans",
            "Provide additional tutoring and support",
            "Focus on building foundational skills",
        ),
    ),
}


@dataclass(frozen=True)
class PersonaSignals:
    """Inputs the persona rules look at."""

    score: float
    attention: float
    spread: float
    engagement_time: float


PersonaRule = Tuple[Callable[[PersonaSignals], bool], PersonaType]

# Evaluated in order; the predicates overlap, so reordering changes outcomes.
PERSONA_RULES: List[PersonaRule] = [
    (
        lambda s: s.score >= PersonaThresholds.HIGH_ACHIEVER_SCORE
        and s.attention >= PersonaThresholds.HIGH_ACHIEVER_ATTENTION,
        PersonaType.HIGH_ACHIEVER,
    ),
    (
        lambda s: s.score >= PersonaThresholds.STEADY_SCORE
        and s.spread <= PersonaThresholds.STEADY_MAX_SPREAD,
        PersonaType.STEADY_LEARNER,
    ),
    (
        lambda s: s.spread > PersonaThresholds.INCONSISTENT_MIN_SPREAD
        or (s.attention < PersonaThresholds.INCONSISTENT_ATTENTION and s.score > PersonaThresholds.INCONSISTENT_SCORE)
        or 0 < s.engagement_time < PersonaThresholds.LOW_ENGAGEMENT_MINUTES,
        PersonaType.INCONSISTENT_PERFORMER,
    ),
]
DEFAULT_PERSONA = PersonaType.NEEDS_SUPPORT


def score_spread(record: StudentRecord) -> float:
    """
    Population standard deviation of the student's own three core scores.

    Uses comprehension/focus/retention when all present, else the legacy
    math/science/english triplet, else 0.
    """

    for triplet in (COGNITIVE_TRIPLET, LEGACY_TRIPLET):
        if record.has_all(triplet):
            values = np.array([getattr(record, name) for name in triplet], dtype=float)
            return float(np.std(values, ddof=0))
    return 0.0


def persona_signals(score: float, record: StudentRecord) -> PersonaSignals:
    return PersonaSignals(
        score=score,
        attention=record.value_or_zero("attention"),
        spread=score_spread(record),
        engagement_time=record.value_or_zero("engagement_time"),
    )


def match_persona_type(signals: PersonaSignals) -> PersonaType:
    for predicate, persona_type in PERSONA_RULES:
        if predicate(signals):
            return persona_type
    return DEFAULT_PERSONA


def classify_persona(score: float, record: StudentRecord) -> LearningPersona:
    """Return the persona for a resolved score and the student's attributes."""

    return PERSONAS[match_persona_type(persona_signals(score, record))]
