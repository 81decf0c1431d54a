"""Metric classification: canonical ordering, display names and banding."""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Literal, NamedTuple, Optional, Sequence

from config.settings import settings
from evaluations.types import MetricScore

ScoreTier = Literal["A", "B", "C", "D"]
RunStatusBand = Literal["Strong", "Moderate", "Needs Work"]
RagStatus = Literal["green", "amber", "red"]
ConfidenceLevel = Literal["High", "Medium", "Low"]


class MetricDefinition(NamedTuple):
    code: str
    client_name: str
    academic_term: str


# Strategic priority order (CABAS), not numeric order.
METRIC_ORDER: tuple[MetricDefinition, ...] = (
    MetricDefinition("M1", "Operational Strength", "Technical Fitness"),
    MetricDefinition("M2", "Future Readiness", "Evolutionary Fitness"),
    MetricDefinition("M9", "Run/Transform Balance", "Ambidexterity"),
    MetricDefinition("M5", "Market Radar", "Sensing"),
    MetricDefinition("M3", "Insight-to-Action", "Learning Effectiveness"),
    MetricDefinition("M13", "Defensible Strengths", "VRIN Competitive Advantage"),
    MetricDefinition("M4", "Implementation Speed", "Execution Agility"),
    MetricDefinition("M6", "Decision Flow", "Information Flow Quality"),
    MetricDefinition("M7", "Knowledge Leverage", "Integration & Reuse"),
    MetricDefinition("M8", "Accountability Speed", "Ownership Latency"),
    MetricDefinition("M10", "Change Readiness", "Organizational Readiness"),
    MetricDefinition("M11", "Structure Fitness", "Organizational Design"),
    MetricDefinition("M12", "Capacity & Tools", "Resource Availability"),
    MetricDefinition("M14", "Risk Tolerance", "Risk Appetite"),
)

_INDEX: Dict[str, int] = {definition.code: idx for idx, definition in enumerate(METRIC_ORDER)}
_BY_CODE: Dict[str, MetricDefinition] = {definition.code: definition for definition in METRIC_ORDER}

UNNUMBERED = 999


def metric_definition(code: Optional[str]) -> Optional[MetricDefinition]:
    if not code:
        return None
    return _BY_CODE.get(code)


def metric_display_name(code: Optional[str], name: Optional[str] = None) -> str:
    """Return ``"{client name} ({academic term})"`` for known codes.

    Unknown codes fall back to the record's own name, then the raw code,
    then the configured unknown-metric label.
    """

    definition = metric_definition(code)
    if definition is not None:
        return f"{definition.client_name} ({definition.academic_term})"
    return name or code or settings.UNKNOWN_METRIC_LABEL


def canonical_index(code: Optional[str]) -> int:
    """Position in ``METRIC_ORDER``; unknown codes get the table length."""

    if not code:
        return len(METRIC_ORDER)
    return _INDEX.get(code, len(METRIC_ORDER))


def sort_metrics_canonical(metrics: Iterable[MetricScore]) -> List[MetricScore]:
    # sorted() is stable, so unknown codes keep their input order at the end.
    return sorted(metrics, key=lambda metric: canonical_index(metric.metric_code))


def metric_number(code: Optional[str]) -> int:
    """Number embedded in a metric code (``"M12"`` -> 12), 999 when absent."""

    digits = re.sub(r"\D", "", code or "")
    return int(digits) if digits else UNNUMBERED


def sort_metrics_by_number(metrics: Iterable[MetricScore]) -> List[MetricScore]:
    return sorted(metrics, key=lambda metric: metric_number(metric.metric_code))


def score_tier(score: Optional[float]) -> ScoreTier:
    """Per-metric four-tier color band (80/70/60)."""

    value = score or 0.0
    if value >= 80:
        return "A"
    if value >= 70:
        return "B"
    if value >= 60:
        return "C"
    return "D"


def dimension_tier(score: Optional[float]) -> ScoreTier:
    """Map a 1-5 dimension score onto the four-tier band."""

    return score_tier((score or 0.0) * 20)


def run_status_band(score: Optional[float]) -> RunStatusBand:
    """Overall run status band (70/50). Kept separate from ``score_tier``."""

    value = score or 0.0
    if value >= 70:
        return "Strong"
    if value >= 50:
        return "Moderate"
    return "Needs Work"


def interview_rag_status(score: Optional[float]) -> RagStatus:
    value = score or 0.0
    if value >= 80:
        return "green"
    if value >= 60:
        return "amber"
    return "red"


def band_counts(metrics: Sequence[MetricScore]) -> Dict[RunStatusBand, int]:
    """Count metrics per run status band."""

    counts: Dict[RunStatusBand, int] = {"Strong": 0, "Moderate": 0, "Needs Work": 0}
    for metric in metrics:
        counts[run_status_band(metric.overall_score)] += 1
    return counts


def confidence_level(labels: Sequence[Optional[str]]) -> ConfidenceLevel:
    """Classify a set of per-metric confidence labels.

    The ratio of ``"high"`` labels decides: >= 0.7 High, >= 0.4 Medium,
    otherwise Low. An empty set is Low.
    """

    if not labels:
        return "Low"
    high = sum(1 for label in labels if (label or "").lower() == "high")
    return confidence_from_ratio(high / len(labels))


def confidence_from_ratio(ratio: float) -> ConfidenceLevel:
    if ratio >= 0.7:
        return "High"
    if ratio >= 0.4:
        return "Medium"
    return "Low"


def metrics_confidence(metrics: Sequence[MetricScore]) -> ConfidenceLevel:
    return confidence_level([metric.confidence for metric in metrics])


__all__ = [
    "METRIC_ORDER",
    "MetricDefinition",
    "metric_definition",
    "metric_display_name",
    "canonical_index",
    "sort_metrics_canonical",
    "metric_number",
    "sort_metrics_by_number",
    "score_tier",
    "dimension_tier",
    "run_status_band",
    "interview_rag_status",
    "band_counts",
    "confidence_level",
    "confidence_from_ratio",
    "metrics_confidence",
]
