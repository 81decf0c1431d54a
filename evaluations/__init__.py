"""Pure aggregation and drill-down helpers for evaluation runs."""
from .aggregator import RunSummaryView, aggregate_run_metrics, run_summary
from .flags import FlagPartition, flags_for_interview, flags_for_metric, partition_flags
from .metrics import (
    METRIC_ORDER,
    confidence_level,
    metric_display_name,
    run_status_band,
    score_tier,
    sort_metrics_canonical,
)
from .ordering import resolve_first, sort_assessments, sort_businesses, sort_runs
from .selectors import (
    InterviewDetailView,
    InterviewRow,
    average_score,
    interview_breakdown,
    interview_detail,
    metrics_for_interview,
    questions_for_interview,
)

__all__ = [
    "METRIC_ORDER",
    "RunSummaryView",
    "aggregate_run_metrics",
    "run_summary",
    "FlagPartition",
    "flags_for_interview",
    "flags_for_metric",
    "partition_flags",
    "confidence_level",
    "metric_display_name",
    "run_status_band",
    "score_tier",
    "sort_metrics_canonical",
    "resolve_first",
    "sort_assessments",
    "sort_businesses",
    "sort_runs",
    "InterviewDetailView",
    "InterviewRow",
    "average_score",
    "interview_breakdown",
    "interview_detail",
    "metrics_for_interview",
    "questions_for_interview",
]
