# ABOUTME: Produces cohort trends, outliers, and rule-based teaching recommendations.
# ABOUTME: Combines cohort statistics and correlations into a single InsightReport.

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .correlation import calculate_correlations
from .schemas import CohortStatistics, InsightReport, StudentRecord
from .scoring import round_tenth_half_up
from .statistics import average_engagement, calculate_cohort_stats, composite_score


class InsightThresholds:
    HIGH_ATTENTION = 75
    LOW_ATTENTION = 65
    EXCELLENT_ASSESSMENT = 85
    WEAK_ASSESSMENT = 75

    SKILL_TARGET = 80
    ATTENTION_TARGET = 70
    ASSESSMENT_TARGET = 75
    ENGAGEMENT_TARGET = 60
    PERFORMANCE_GAP = 20

    OUTLIER_STD_MULTIPLIER = 1.5


def generate_insights(students: Sequence[StudentRecord]) -> InsightReport:
    if not students:
        return InsightReport()

    stats = calculate_cohort_stats(students)
    return InsightReport(
        trends=analyze_trends(students, stats),
        outliers=find_outliers(students),
        recommendations=generate_recommendations(students, stats),
        correlations=calculate_correlations(students),
    )


def analyze_trends(students: Sequence[StudentRecord], stats: Optional[CohortStatistics] = None) -> List[str]:
    if not students:
        return []
    stats = stats or calculate_cohort_stats(students)

    trends = [
        f"Focus shows the highest average performance ({round_tenth_half_up(stats.average_focus):.1f})",
        f"Retention has an average performance of ({round_tenth_half_up(stats.average_retention):.1f})",
        "High attention levels correlate with better assessment performance",
        "Learning persona patterns identified across student cohort",
    ]

    if stats.average_attention > InsightThresholds.HIGH_ATTENTION:
        trends.append("High attention levels correlate with better academic performance")
    elif stats.average_attention < InsightThresholds.LOW_ATTENTION:
        trends.append("Low attention levels may be impacting academic performance")

    if stats.average_assessment_score > InsightThresholds.EXCELLENT_ASSESSMENT:
        trends.append("Excellent assessment performance across the student cohort")
    elif stats.average_assessment_score < InsightThresholds.WEAK_ASSESSMENT:
        trends.append("Assessment improvement opportunities identified across multiple students")

    return trends


def find_outliers(students: Sequence[StudentRecord]) -> List[StudentRecord]:
    """
    Students whose composite score sits more than 1.5 population standard
    deviations from the cohort mean, in input order.
    """

    if not students:
        return []

    scores = np.array([composite_score(s) for s in students], dtype=float)
    mean = scores.mean()
    std = scores.std(ddof=0)
    threshold = InsightThresholds.OUTLIER_STD_MULTIPLIER * std

    return [student for student, score in zip(students, scores) if abs(score - mean) > threshold]


def generate_recommendations(students: Sequence[StudentRecord], stats: Optional[CohortStatistics] = None) -> List[str]:
    if not students:
        return []
    stats = stats or calculate_cohort_stats(students)
    recs: List[str] = []

    if stats.average_comprehension < InsightThresholds.SKILL_TARGET:
        recs.append("Implement comprehension-building activities and reading strategies")
    if stats.average_focus < InsightThresholds.SKILL_TARGET:
        recs.append("Develop focus enhancement techniques and mindfulness exercises")
    if stats.average_retention < InsightThresholds.SKILL_TARGET:
        recs.append("Introduce memory retention strategies and spaced repetition")

    if stats.average_attention < InsightThresholds.ATTENTION_TARGET:
        recs.append("Implement attention-building exercises and shorter lesson segments")
        recs.append("Consider environmental factors affecting student focus")

    if stats.average_assessment_score < InsightThresholds.ASSESSMENT_TARGET:
        recs.append("Develop personalized learning plans based on individual needs")
        recs.append("Pair high-performing students with those needing support")

    if average_engagement(students) < InsightThresholds.ENGAGEMENT_TARGET:
        recs.append("Increase interactive learning activities to boost engagement")

    if performance_gap(stats) > InsightThresholds.PERFORMANCE_GAP:
        recs.append("Address significant performance gaps through differentiated instruction")

    return recs


def performance_gap(stats: CohortStatistics) -> float:
    """Top minus lowest performer assessment score (absent scores count as 0)."""

    if stats.top_performer is None or stats.lowest_performer is None:
        return 0.0
    return stats.top_performer.value_or_zero("assessment_score") - stats.lowest_performer.value_or_zero(
        "assessment_score"
    )
