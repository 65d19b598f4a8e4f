# ABOUTME: Tests ordered persona rules and the per-student score spread.
# ABOUTME: Covers rule precedence, legacy fallback, and engagement triggers.

import pytest

from src.persona_engine.personas import (
    PERSONA_RULES,
    PERSONAS,
    classify_persona,
    persona_signals,
    score_spread,
)
from src.persona_engine.schemas import PersonaType, StudentRecord


def test_high_achiever_wins_even_when_steady_also_matches():
    record = StudentRecord(name="a", attention=8, comprehension=80, focus=80, retention=80)
    persona = classify_persona(90, record)
    assert persona.type == PersonaType.HIGH_ACHIEVER


def test_high_achiever_uses_literal_attention_threshold():
    record = StudentRecord(name="a", attention=7.4, comprehension=90, focus=90, retention=90)
    assert classify_persona(90, record).type == PersonaType.STEADY_LEARNER


def test_steady_learner_needs_low_spread():
    record = StudentRecord(name="a", attention=5, comprehension=75, focus=70, retention=72)
    assert classify_persona(72, record).type == PersonaType.STEADY_LEARNER


def test_large_spread_is_inconsistent_not_needs_support():
    record = StudentRecord(name="a", attention=50, comprehension=20, focus=50, retention=80)
    assert score_spread(record) > 15
    assert classify_persona(50, record).type == PersonaType.INCONSISTENT_PERFORMER


def test_low_attention_with_passing_score_is_inconsistent():
    record = StudentRecord(name="a", attention=5)
    assert classify_persona(65, record).type == PersonaType.INCONSISTENT_PERFORMER


def test_short_engagement_is_inconsistent():
    record = StudentRecord(name="a", attention=40, engagement_time=30)
    assert classify_persona(40, record).type == PersonaType.INCONSISTENT_PERFORMER


def test_zero_engagement_does_not_trigger_inconsistent():
    record = StudentRecord(name="a", attention=40, engagement_time=0)
    assert classify_persona(40, record).type == PersonaType.NEEDS_SUPPORT


def test_needs_support_default():
    record = StudentRecord(name="a", attention=40, comprehension=40, focus=42, retention=38, engagement_time=90)
    assert classify_persona(40, record).type == PersonaType.NEEDS_SUPPORT


def test_spread_prefers_current_triplet_over_legacy():
    record = StudentRecord(name="a", comprehension=60, focus=60, retention=60, math=0, science=50, english=100)
    assert score_spread(record) == 0.0


def test_spread_falls_back_to_legacy_triplet():
    record = StudentRecord(name="a", comprehension=60, math=70, science=80, english=90)
    assert score_spread(record) == pytest.approx(8.16496, rel=1e-4)


def test_spread_zero_without_complete_triplet():
    assert score_spread(StudentRecord(name="a", comprehension=10, focus=90)) == 0.0


def test_signals_default_missing_values_to_zero():
    signals = persona_signals(55, StudentRecord(name="a"))
    assert signals.attention == 0
    assert signals.engagement_time == 0
    assert signals.spread == 0


def test_rule_order_is_fixed():
    order = [persona_type for _, persona_type in PERSONA_RULES]
    assert order == [
        PersonaType.HIGH_ACHIEVER,
        PersonaType.STEADY_LEARNER,
        PersonaType.INCONSISTENT_PERFORMER,
    ]


def test_every_persona_has_three_recommendations():
    for persona_type in PersonaType:
        persona = PERSONAS[persona_type]
        assert persona.description
        assert len(persona.recommendations) == 3
