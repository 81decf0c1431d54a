import random

import pytest

from evaluations.aggregator import aggregate_run_metrics, run_summary
from evaluations.types import Flag, MetricScore, RunDetail, RunScores, Source


def _metric(code, score, source=None, idx=None, **extra):
    return MetricScore(
        id=idx or f"{code}-{source}-{score}",
        source_id=source,
        metric_code=code,
        overall_score=score,
        **extra,
    )


def test_pre_aggregated_duplicates_keep_first():
    result = aggregate_run_metrics([_metric("M1", 80), _metric("M1", 60)])
    assert len(result) == 1
    assert result[0].overall_score == 80


def test_pre_aggregated_wins_over_per_source():
    records = [_metric("M1", 10, "A"), _metric("M2", 55), _metric("M1", 90, "B")]
    result = aggregate_run_metrics(records)
    assert [m.metric_code for m in result] == ["M2"]
    assert result[0] is records[1]


def test_per_source_records_are_averaged():
    result = aggregate_run_metrics([_metric("M1", 80, "A"), _metric("M1", 60, "B")])
    assert len(result) == 1
    aggregate = result[0]
    assert aggregate.overall_score == pytest.approx(70)
    assert aggregate.id == "agg-M1"
    assert aggregate.source_id is None


def test_missing_score_counts_as_zero():
    result = aggregate_run_metrics([_metric("M1", 90, "A"), _metric("M1", None, "B")])
    assert result[0].overall_score == pytest.approx(45)


def test_metadata_comes_from_first_member():
    records = [
        _metric("M3", 40, "A", metric_name="Learning", confidence="medium"),
        _metric("M3", 60, "B", metric_name="Other", confidence="high"),
    ]
    aggregate = aggregate_run_metrics(records)[0]
    assert aggregate.metric_name == "Learning"
    assert aggregate.confidence == "medium"


def test_one_record_per_distinct_code():
    records = [_metric(f"M{i % 4}", float(i), f"S{i % 3}") for i in range(12)]
    result = aggregate_run_metrics(records)
    assert len(result) == len({m.metric_code for m in records})


def test_aggregation_is_order_independent():
    records = [_metric(f"M{i % 5}", float((i * 37) % 101), f"S{i}") for i in range(25)]
    expected = sorted((m.metric_code, m.overall_score) for m in aggregate_run_metrics(records))
    shuffled = list(records)
    random.Random(7).shuffle(shuffled)
    actual = sorted((m.metric_code, m.overall_score) for m in aggregate_run_metrics(shuffled))
    assert [code for code, _ in actual] == [code for code, _ in expected]
    for (_, got), (_, want) in zip(actual, expected):
        assert got == pytest.approx(want)


def test_aggregation_is_idempotent_and_does_not_mutate_input():
    records = [_metric("M1", 80, "A"), _metric("M2", 30, "A")]
    first = aggregate_run_metrics(records)
    second = aggregate_run_metrics(records)
    assert first == second
    assert records[0].source_id == "A" and records[0].id == "M1-A-80"
    # aggregated output is itself pre-aggregated and passes through unchanged
    assert aggregate_run_metrics(first) == first


def test_empty_input():
    assert aggregate_run_metrics([]) == []


def test_run_summary_view():
    run = RunDetail(
        id="r1",
        run_number=4,
        status="completed",
        sources=[Source(id="A"), Source(id="B")],
        flags=[
            Flag(id="f1", is_resolved=False),
            Flag(id="f2", is_resolved=True),
        ],
    )
    scores = RunScores(
        metric_scores=[
            _metric("M10", 90, "A"),
            _metric("M2", 40, "A"),
            _metric("M2", 61, "B"),
        ]
    )
    view = run_summary(run, scores)
    assert [m.metric_code for m in view.metrics] == ["M2", "M10"]
    # (50.5 + 90) / 2 = 70.25
    assert view.average_score == 70
    assert view.status_band == "Strong"
    assert view.band_counts == {"Strong": 1, "Moderate": 1, "Needs Work": 0}
    assert [f.id for f in view.unresolved_flags] == ["f1"]
    assert view.source_count == 2


def test_run_summary_without_scores():
    view = run_summary(RunDetail(id="r", run_number=1, status="pending"), None)
    assert view.metrics == []
    assert view.average_score == 0
    assert view.status_band == "Needs Work"
