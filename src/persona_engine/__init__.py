# ABOUTME: Student persona analytics engine: scoring, personas, statistics, insights.
# ABOUTME: Re-exports the main entrypoints and data structures.

from .schemas import (
    CohortStatistics,
    CorrelationMatrix,
    EnrichedStudent,
    InsightReport,
    LearningPersona,
    PersonaType,
    StudentRecord,
    record_from_mapping,
    records_from_frame,
)
from .scoring import resolve_assessment_score
from .personas import classify_persona
from .statistics import calculate_cohort_stats
from .correlation import pearson_correlation
from .insights import generate_insights
from .enrichment import cluster_students
from .pipeline import AnalysisResult, run_analysis

__all__ = [
    "AnalysisResult",
    "CohortStatistics",
    "CorrelationMatrix",
    "EnrichedStudent",
    "InsightReport",
    "LearningPersona",
    "PersonaType",
    "StudentRecord",
    "calculate_cohort_stats",
    "classify_persona",
    "cluster_students",
    "generate_insights",
    "pearson_correlation",
    "record_from_mapping",
    "records_from_frame",
    "resolve_assessment_score",
    "run_analysis",
]
