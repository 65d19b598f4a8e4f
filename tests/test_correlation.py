# ABOUTME: Tests the Pearson correlation helper and cohort correlation matrix.
# ABOUTME: Zero-variance and empty inputs return 0; mismatched lengths fail fast.

import pytest

from src.persona_engine.correlation import calculate_correlations, pearson_correlation
from src.persona_engine.schemas import StudentRecord


def test_perfect_positive_correlation():
    assert pearson_correlation([1, 2, 3], [1, 2, 3]) == 1


def test_perfect_negative_correlation():
    assert pearson_correlation([1, 2, 3], [3, 2, 1]) == pytest.approx(-1)


def test_zero_variance_returns_zero():
    assert pearson_correlation([1, 1, 1], [1, 2, 3]) == 0


def test_empty_series_returns_zero():
    assert pearson_correlation([], []) == 0


def test_mismatched_lengths_raise():
    with pytest.raises(ValueError):
        pearson_correlation([1, 2], [1, 2, 3])


def test_known_value():
    # 14 / sqrt(20 * 19)
    assert pearson_correlation([1, 2, 3, 4], [2, 4, 5, 4]) == pytest.approx(0.718185, rel=1e-5)


def test_cohort_matrix_substitutes_zero_for_missing():
    students = [
        StudentRecord(name="a", comprehension=50, focus=50, retention=90, attention=60, assessment_score=60),
        StudentRecord(name="b", comprehension=70, focus=70, retention=80, attention=80, assessment_score=80),
        StudentRecord(name="c", attention=100),
    ]
    matrix = calculate_correlations(students)
    assert matrix.comprehension_focus == pytest.approx(1.0)
    # c has no assessment score, so its 0 pulls the attention relationship negative.
    assert matrix.attention_performance < 0


def test_empty_cohort_matrix_is_all_zero():
    assert calculate_correlations([]).to_dict() == {
        "attention_performance": 0.0,
        "comprehension_focus": 0.0,
        "comprehension_retention": 0.0,
        "focus_retention": 0.0,
    }
