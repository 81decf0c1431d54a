"""Cross-source aggregation of metric scores for a single run."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from evaluations.flags import partition_flags
from evaluations.metrics import RunStatusBand, band_counts, run_status_band, sort_metrics_by_number
from evaluations.selectors import average_score, round_score
from evaluations.types import Flag, MetricScore, RunDetail, RunScores


def aggregate_id(metric_code: str) -> str:
    return f"agg-{metric_code}"


def _dedupe_keep_first(metrics: Iterable[MetricScore]) -> List[MetricScore]:
    seen: set[str] = set()
    kept: List[MetricScore] = []
    for metric in metrics:
        if metric.metric_code in seen:
            continue
        seen.add(metric.metric_code)
        kept.append(metric)
    return kept


def aggregate_run_metrics(metric_scores: Iterable[MetricScore]) -> List[MetricScore]:
    """Collapse a run's metric records to one record per ``metric_code``.

    Pre-aggregated records (``source_id`` is None) win outright: they are
    deduplicated keep-first and returned unchanged, never merged. Only when
    none exist are per-source records averaged. A missing ``overall_score``
    counts as 0 in that mean. Synthesized records copy name and confidence
    from the first record seen for the code and get the id ``agg-{code}``.
    """

    records = list(metric_scores)
    pre_aggregated = [metric for metric in records if metric.source_id is None]
    if pre_aggregated:
        return _dedupe_keep_first(pre_aggregated)

    groups: Dict[str, List[MetricScore]] = {}
    for metric in records:
        groups.setdefault(metric.metric_code, []).append(metric)

    aggregated: List[MetricScore] = []
    for code, members in groups.items():
        sample = members[0]
        aggregated.append(
            sample.model_copy(
                update={
                    "id": aggregate_id(code),
                    "source_id": None,
                    "overall_score": average_score(members),
                }
            )
        )
    return aggregated


class RunSummaryView(BaseModel):
    run_id: str
    run_number: int
    status: str
    metrics: List[MetricScore] = Field(default_factory=list)
    average_score: int = 0
    status_band: RunStatusBand = "Needs Work"
    band_counts: Dict[RunStatusBand, int] = Field(default_factory=dict)
    unresolved_flags: List[Flag] = Field(default_factory=list)
    source_count: int = 0


def run_summary(run: RunDetail, scores: Optional[RunScores]) -> RunSummaryView:
    """Aggregated view shown when a run is first opened."""

    metrics = sort_metrics_by_number(aggregate_run_metrics(scores.metric_scores if scores else []))
    avg = round_score(average_score(metrics))
    return RunSummaryView(
        run_id=run.id,
        run_number=run.run_number,
        status=run.status,
        metrics=metrics,
        average_score=avg,
        status_band=run_status_band(avg),
        band_counts=band_counts(metrics),
        unresolved_flags=partition_flags(run.flags).unresolved,
        source_count=len(run.sources),
    )


__all__ = ["aggregate_id", "aggregate_run_metrics", "RunSummaryView", "run_summary"]
