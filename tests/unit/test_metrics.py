from evaluations.metrics import (
    METRIC_ORDER,
    band_counts,
    canonical_index,
    confidence_from_ratio,
    confidence_level,
    dimension_tier,
    interview_rag_status,
    metric_display_name,
    metric_number,
    run_status_band,
    score_tier,
    sort_metrics_by_number,
    sort_metrics_canonical,
)
from evaluations.types import MetricScore


def _metric(code: str, idx: int = 0, score: float = 50.0) -> MetricScore:
    return MetricScore(id=f"{code}-{idx}", metric_code=code, overall_score=score)


def test_table_has_fourteen_unique_codes():
    codes = [definition.code for definition in METRIC_ORDER]
    assert len(codes) == 14
    assert len(set(codes)) == 14
    assert codes[:3] == ["M1", "M2", "M9"]


def test_display_name_fallback_chain():
    assert metric_display_name("M9") == "Run/Transform Balance (Ambidexterity)"
    assert metric_display_name("X1", "Custom Metric") == "Custom Metric"
    assert metric_display_name("X1") == "X1"
    assert metric_display_name("", None) == "Unknown Metric"
    assert metric_display_name(None) == "Unknown Metric"


def test_canonical_sort_places_unknown_last_in_input_order():
    metrics = [_metric("Z9", 1), _metric("M3"), _metric("Q2", 2), _metric("M1"), _metric("Z9", 3)]
    ordered = sort_metrics_canonical(metrics)
    assert [m.id for m in ordered] == ["M1-0", "M3-0", "Z9-1", "Q2-2", "Z9-3"]
    assert canonical_index("Q2") == len(METRIC_ORDER)


def test_canonical_sort_is_idempotent():
    metrics = [_metric(code) for code in ("M14", "M2", "X", "M1", "M9")]
    once = sort_metrics_canonical(metrics)
    assert sort_metrics_canonical(once) == once


def test_sort_by_number():
    metrics = [_metric("M10"), _metric("M2"), _metric("ABC"), _metric("M1")]
    assert [m.metric_code for m in sort_metrics_by_number(metrics)] == ["M1", "M2", "M10", "ABC"]
    assert metric_number("ABC") == 999


def test_four_tier_band():
    assert score_tier(80) == "A"
    assert score_tier(79.9) == "B"
    assert score_tier(70) == "B"
    assert score_tier(60) == "C"
    assert score_tier(59.99) == "D"
    assert score_tier(None) == "D"
    assert dimension_tier(4) == "A"
    assert dimension_tier(3) == "C"


def test_three_tier_band_is_separate_from_four_tier():
    assert run_status_band(70) == "Strong"
    assert run_status_band(69) == "Moderate"
    assert run_status_band(50) == "Moderate"
    assert run_status_band(49.5) == "Needs Work"
    # 75 is tier B but already Strong
    assert score_tier(75) == "B" and run_status_band(75) == "Strong"


def test_interview_rag_status():
    assert interview_rag_status(80) == "green"
    assert interview_rag_status(60) == "amber"
    assert interview_rag_status(59) == "red"


def test_band_counts():
    counts = band_counts([_metric("M1", score=90), _metric("M2", score=55), _metric("M3", score=10), _metric("M4")])
    assert counts == {"Strong": 1, "Moderate": 2, "Needs Work": 1}


def test_confidence_boundaries():
    assert confidence_level([]) == "Low"
    assert confidence_level(["high"] * 7 + ["low"] * 3) == "High"
    assert confidence_level(["HIGH", "high", "medium", "low", None]) == "Medium"
    assert confidence_from_ratio(0.7) == "High"
    assert confidence_from_ratio(0.4) == "Medium"
    assert confidence_from_ratio(0.399999) == "Low"
    assert confidence_from_ratio(0.0) == "Low"
