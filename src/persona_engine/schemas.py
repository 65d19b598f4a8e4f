# ABOUTME: Defines canonical student, persona, statistics, and insight structures.
# ABOUTME: Normalizes raw upload rows (current or legacy schema) into one record type.

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

COGNITIVE_TRIPLET = ("comprehension", "focus", "retention")
LEGACY_TRIPLET = ("math", "science", "english")

# Upload column names that differ from the dataclass field names.
COLUMN_ALIASES = {
    "class": "class_group",
    "classGroup": "class_group",
    "studentId": "student_id",
    "assessmentScore": "assessment_score",
    "engagementTime": "engagement_time",
}

_FLOAT_FIELDS = (
    "comprehension",
    "focus",
    "retention",
    "attention",
    "math",
    "science",
    "english",
    "skill",
    "assessment_score",
)
_INT_FIELDS = ("class_group", "engagement_time")


class PersonaType(str, Enum):
    HIGH_ACHIEVER = "High Achiever"
    STEADY_LEARNER = "Steady Learner"
    INCONSISTENT_PERFORMER = "Inconsistent Performer"
    NEEDS_SUPPORT = "Needs Support"


@dataclass(frozen=True)
class LearningPersona:
    """Persona label with its fixed rationale and guidance."""

    type: PersonaType
    description: str
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "description": self.description,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class StudentRecord:
    """
    Canonical student row.

    Current-schema and legacy-schema attributes share one record; ``None``
    marks an attribute as absent. Legacy ``attention`` may be on a 0-10 scale.
    """

    name: str
    student_id: Optional[str] = None
    class_group: Optional[int] = None
    comprehension: Optional[float] = None
    focus: Optional[float] = None
    retention: Optional[float] = None
    attention: Optional[float] = None
    math: Optional[float] = None
    science: Optional[float] = None
    english: Optional[float] = None
    skill: Optional[float] = None
    assessment_score: Optional[float] = None
    engagement_time: Optional[int] = None

    def has_all(self, names: Tuple[str, ...]) -> bool:
        return all(getattr(self, n) is not None for n in names)

    def value_or_zero(self, name: str) -> float:
        value = getattr(self, name)
        return 0.0 if value is None else value

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.name] = value.to_dict() if hasattr(value, "to_dict") else value
        return out


@dataclass(frozen=True)
class EnrichedStudent(StudentRecord):
    """StudentRecord with a resolved assessment score and an attached persona."""

    persona: Optional[LearningPersona] = None

    @classmethod
    def from_record(
        cls, record: StudentRecord, assessment_score: float, persona: LearningPersona
    ) -> "EnrichedStudent":
        values = {f.name: getattr(record, f.name) for f in fields(StudentRecord)}
        values["assessment_score"] = assessment_score
        return cls(**values, persona=persona)


@dataclass(frozen=True)
class CohortStatistics:
    total_students: int = 0
    average_comprehension: float = 0.0
    average_focus: float = 0.0
    average_retention: float = 0.0
    average_assessment_score: float = 0.0
    average_attention: float = 0.0
    top_performer: Optional[StudentRecord] = None
    lowest_performer: Optional[StudentRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_students": self.total_students,
            "average_comprehension": self.average_comprehension,
            "average_focus": self.average_focus,
            "average_retention": self.average_retention,
            "average_assessment_score": self.average_assessment_score,
            "average_attention": self.average_attention,
            "top_performer": self.top_performer.to_dict() if self.top_performer else None,
            "lowest_performer": self.lowest_performer.to_dict() if self.lowest_performer else None,
        }


@dataclass(frozen=True)
class CorrelationMatrix:
    attention_performance: float = 0.0
    comprehension_focus: float = 0.0
    comprehension_retention: float = 0.0
    focus_retention: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "attention_performance": self.attention_performance,
            "comprehension_focus": self.comprehension_focus,
            "comprehension_retention": self.comprehension_retention,
            "focus_retention": self.focus_retention,
        }


@dataclass(frozen=True)
class InsightReport:
    trends: List[str] = field(default_factory=list)
    outliers: List[StudentRecord] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    correlations: CorrelationMatrix = field(default_factory=CorrelationMatrix)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trends": list(self.trends),
            "outliers": [s.to_dict() for s in self.outliers],
            "recommendations": list(self.recommendations),
            "correlations": self.correlations.to_dict(),
        }


def record_from_mapping(row: Mapping[str, Any]) -> StudentRecord:
    """
    Build a StudentRecord from one raw row (dict or pandas row).

    Blank strings and NaN are treated as absent. Unknown keys are ignored.
    """

    values: Dict[str, Any] = {}
    for key, raw in row.items():
        name = COLUMN_ALIASES.get(str(key), str(key))
        if _is_missing(raw):
            continue
        if name in _FLOAT_FIELDS:
            values[name] = float(raw)
        elif name in _INT_FIELDS:
            values[name] = int(float(raw))
        elif name in ("name", "student_id"):
            values[name] = str(raw).strip()

    name = values.pop("name", "")
    if not name:
        raise ValueError("Student record requires a non-empty 'name'.")
    return StudentRecord(name=name, **values)


def records_from_frame(df: pd.DataFrame) -> List[StudentRecord]:
    """Convert a DataFrame of uploaded rows into records, keeping row order."""

    if df is None or df.empty:
        return []
    return [record_from_mapping(row) for row in df.to_dict(orient="records")]


def _is_missing(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))
