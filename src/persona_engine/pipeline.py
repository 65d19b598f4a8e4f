# ABOUTME: Runs the end-to-end persona analytics pipeline on a cohort.
# ABOUTME: Enrichment, cohort statistics, insights, and persona breakdown in one result.

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config import PredictionServiceConfig
from .enrichment import cluster_students
from .insights import generate_insights
from .prediction_client import PredictionClient
from .schemas import CohortStatistics, EnrichedStudent, InsightReport, StudentRecord
from .statistics import calculate_cohort_stats, persona_breakdown


@dataclass(frozen=True)
class AnalysisResult:
    students: List[EnrichedStudent] = field(default_factory=list)
    statistics: CohortStatistics = field(default_factory=CohortStatistics)
    insights: InsightReport = field(default_factory=InsightReport)
    persona_breakdown: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "students": [s.to_dict() for s in self.students],
            "statistics": self.statistics.to_dict(),
            "insights": self.insights.to_dict(),
            "persona_breakdown": list(self.persona_breakdown),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def run_analysis(records: Sequence[StudentRecord], client: Optional[PredictionClient] = None) -> AnalysisResult:
    """
    Enrich, aggregate, and summarize a cohort.

    Without a client (or when the service fails) scoring is fully local.
    """

    students = cluster_students(records, client=client)
    return AnalysisResult(
        students=students,
        statistics=calculate_cohort_stats(students),
        insights=generate_insights(students),
        persona_breakdown=persona_breakdown(students),
    )


def build_client(config: PredictionServiceConfig) -> Optional[PredictionClient]:
    return PredictionClient(config) if config.is_configured else None
