# ABOUTME: Resolves a single 0-100 assessment score per student.
# ABOUTME: Prefers authoritative scores, then current-schema weights, then legacy subjects.

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from .schemas import LEGACY_TRIPLET, StudentRecord


class ScoreWeights:
    COMPREHENSION = 0.4
    FOCUS = 0.2
    RETENTION = 0.2
    ATTENTION = 0.2

    LEGACY_ACADEMIC = 0.5
    LEGACY_SKILL = 0.3
    LEGACY_ATTENTION = 0.2

    # Legacy attention above this is already on the 0-100 scale.
    LEGACY_ATTENTION_SCALE_MAX = 10


CURRENT_WEIGHTS = (
    ("comprehension", ScoreWeights.COMPREHENSION),
    ("focus", ScoreWeights.FOCUS),
    ("retention", ScoreWeights.RETENTION),
    ("attention", ScoreWeights.ATTENTION),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_tenth_half_up(value: float) -> float:
    """Round to one decimal place with ties going up (72.25 -> 72.3)."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def resolve_assessment_score(record: StudentRecord) -> float:
    """
    Return the student's composite assessment score on a 0-100 scale.

    An existing ``assessment_score`` is returned untouched. Otherwise the
    present current-schema attributes are combined as a weighted mean
    renormalized by the weights actually used; the legacy subjects are only
    consulted when no current-schema attribute is present.
    """

    if record.assessment_score is not None:
        return record.assessment_score

    total, weight_sum = _current_schema_sum(record)
    if weight_sum == 0:
        total, weight_sum = _legacy_schema_sum(record)

    if weight_sum == 0:
        return 0
    return round_half_up(total / weight_sum)


def _current_schema_sum(record: StudentRecord) -> Tuple[float, float]:
    total = 0.0
    weight_sum = 0.0
    for name, weight in CURRENT_WEIGHTS:
        value = getattr(record, name)
        if value is not None:
            total += value * weight
            weight_sum += weight
    return total, weight_sum


def _legacy_schema_sum(record: StudentRecord) -> Tuple[float, float]:
    if not record.has_all(LEGACY_TRIPLET):
        return 0.0, 0.0

    academic_average = (record.math + record.science + record.english) / 3
    total = academic_average * ScoreWeights.LEGACY_ACADEMIC
    weight_sum = ScoreWeights.LEGACY_ACADEMIC

    if record.skill is not None:
        total += record.skill * ScoreWeights.LEGACY_SKILL
        weight_sum += ScoreWeights.LEGACY_SKILL

    if record.attention is not None:
        total += legacy_attention_to_percent(record.attention) * ScoreWeights.LEGACY_ATTENTION
        weight_sum += ScoreWeights.LEGACY_ATTENTION

    return total, weight_sum


def legacy_attention_to_percent(attention: float) -> float:
    if attention > ScoreWeights.LEGACY_ATTENTION_SCALE_MAX:
        return attention
    return attention * 10
