"""Flag correlation against metrics and interviews."""
from __future__ import annotations

from typing import Iterable, List

from pydantic import BaseModel, Field

from evaluations.types import Flag, MetricScore


class FlagPartition(BaseModel):
    unresolved: List[Flag] = Field(default_factory=list)
    resolved: List[Flag] = Field(default_factory=list)

    def ordered(self) -> List[Flag]:
        """Unresolved flags first, each group in input order."""
        return [*self.unresolved, *self.resolved]

    @property
    def open_count(self) -> int:
        return len(self.unresolved)


def metric_question_ids(metric: MetricScore) -> set[str]:
    return {contribution.question_id for contribution in metric.question_contributions}


def flags_for_metric(flags: Iterable[Flag], metric: MetricScore) -> List[Flag]:
    """Flags sharing at least one question with the metric's contributions."""

    question_ids = metric_question_ids(metric)
    if not question_ids:
        return []
    return [flag for flag in flags if any(qid in question_ids for qid in flag.question_ids)]


def flags_for_interview(flags: Iterable[Flag], source_id: str) -> List[Flag]:
    """Flags whose ``source_ids`` include the interview."""

    return [flag for flag in flags if source_id in flag.source_ids]


def partition_flags(flags: Iterable[Flag]) -> FlagPartition:
    partition = FlagPartition()
    for flag in flags:
        if flag.is_resolved:
            partition.resolved.append(flag)
        else:
            partition.unresolved.append(flag)
    return partition


__all__ = [
    "FlagPartition",
    "metric_question_ids",
    "flags_for_metric",
    "flags_for_interview",
    "partition_flags",
]
