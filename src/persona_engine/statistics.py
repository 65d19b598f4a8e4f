# ABOUTME: Aggregates cohort-level averages and picks top and lowest performers.
# ABOUTME: Also summarizes persona distribution for downstream dashboards.

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from .schemas import COGNITIVE_TRIPLET, CohortStatistics, StudentRecord
from .scoring import round_half_up, round_tenth_half_up

STAT_COLUMNS = ("comprehension", "focus", "retention", "attention", "assessment_score", "engagement_time")


def composite_score(student: StudentRecord) -> float:
    """Assessment score when present, else the mean of the three core scores (absent as 0)."""

    if student.assessment_score is not None:
        return student.assessment_score
    return sum(student.value_or_zero(name) for name in COGNITIVE_TRIPLET) / 3


def cohort_frame(students: Sequence[StudentRecord]) -> pd.DataFrame:
    """
    Tabulate the numeric attributes used for cohort statistics.

    Absent values become 0 so that means divide by the full cohort size.
    Row order matches input order.
    """

    frame = pd.DataFrame(
        [{name: getattr(s, name) for name in STAT_COLUMNS} for s in students],
        columns=list(STAT_COLUMNS),
        dtype=float,
    )
    frame = frame.fillna(0.0)
    frame["composite"] = [float(composite_score(s)) for s in students]
    return frame


def calculate_cohort_stats(students: Sequence[StudentRecord]) -> CohortStatistics:
    if not students:
        return CohortStatistics()

    frame = cohort_frame(students)
    # idxmax/idxmin return the first occurrence, so earlier students win ties.
    top_idx = int(frame["composite"].idxmax())
    low_idx = int(frame["composite"].idxmin())

    return CohortStatistics(
        total_students=len(students),
        average_comprehension=float(frame["comprehension"].mean()),
        average_focus=float(frame["focus"].mean()),
        average_retention=float(frame["retention"].mean()),
        average_assessment_score=float(frame["assessment_score"].mean()),
        average_attention=float(frame["attention"].mean()),
        top_performer=students[top_idx],
        lowest_performer=students[low_idx],
    )


def average_engagement(students: Sequence[StudentRecord]) -> float:
    if not students:
        return 0.0
    return float(cohort_frame(students)["engagement_time"].mean())


def persona_breakdown(students: Sequence[StudentRecord]) -> List[Dict]:
    """
    Count students per persona with cohort share and mean assessment score.

    Personas appear in order of first occurrence; students without a persona
    are skipped.
    """

    rows = []
    for student in students:
        persona = getattr(student, "persona", None)
        if persona is None:
            continue
        rows.append({"persona": persona.type.value, "assessment_score": student.assessment_score})

    if not rows:
        return []

    frame = pd.DataFrame(rows)
    total = len(students)
    summary = []
    for persona_type, group in frame.groupby("persona", sort=False):
        # A zero score counts as unscored here.
        scores = group["assessment_score"].dropna()
        scores = scores[scores != 0]
        summary.append(
            {
                "persona": persona_type,
                "count": int(len(group)),
                "percentage": round_tenth_half_up(len(group) / total * 100),
                "average_score": round_half_up(float(scores.mean())) if not scores.empty else None,
            }
        )
    return summary
