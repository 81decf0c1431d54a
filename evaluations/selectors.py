"""Per-interview selection of metric and question records."""
from __future__ import annotations

import math
import re
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from config.settings import settings
from evaluations.flags import FlagPartition, flags_for_interview, partition_flags
from evaluations.metrics import (
    ConfidenceLevel,
    RagStatus,
    ScoreTier,
    interview_rag_status,
    metrics_confidence,
    score_tier,
    sort_metrics_by_number,
)
from evaluations.types import (
    DimensionAnchor,
    DimensionScore,
    MetricScore,
    QuestionContribution,
    QuestionRubric,
    QuestionScore,
    RunDetail,
    RunScores,
)

Scored = TypeVar("Scored", MetricScore, QuestionScore)

MISSING_QUESTION_TEXT = "Question no longer available"
MISSING_ANCHOR_BEHAVIOR = "No behavioral anchor defined"


def metrics_for_interview(metric_scores: Iterable[MetricScore], source_id: str) -> List[MetricScore]:
    """Metric records of one interview, at most one per ``metric_code``."""

    seen: set[str] = set()
    selected: List[MetricScore] = []
    for metric in metric_scores:
        if metric.source_id != source_id or metric.metric_code in seen:
            continue
        seen.add(metric.metric_code)
        selected.append(metric)
    return selected


def questions_for_interview(question_scores: Iterable[QuestionScore], source_id: str) -> List[QuestionScore]:
    """Question records of one interview, at most one per ``question_id``."""

    seen: set[str] = set()
    selected: List[QuestionScore] = []
    for question in question_scores:
        if question.source_id != source_id or question.question_id in seen:
            continue
        seen.add(question.question_id)
        selected.append(question)
    return selected


def average_score(records: Sequence[Scored]) -> float:
    """Mean ``overall_score``; missing scores count as 0, empty input is 0."""

    if not records:
        return 0.0
    return sum(record.overall_score or 0.0 for record in records) / len(records)


def round_score(value: float) -> int:
    """Round half up, the way the dashboard displays whole-number scores."""

    return int(math.floor(value + 0.5))


def format_interview_id(source_id: str) -> str:
    """Anonymous display id: ``assessment_1768663930241_x`` -> ``INT-1768663``."""

    match = re.search(r"(\d{7})", source_id)
    if match:
        return f"{settings.INTERVIEW_ID_PREFIX}{match.group(1)}"
    return f"{settings.INTERVIEW_ID_PREFIX}{source_id[:7].upper()}"


def question_number(code: Optional[str]) -> int:
    match = re.search(r"\d+", code or "")
    return int(match.group(0)) if match else 999


def sort_questions_by_code(questions: Iterable[QuestionScore]) -> List[QuestionScore]:
    """Order by the first number in the code (``S1``, ``X3a``), then by code."""

    return sorted(questions, key=lambda q: (question_number(q.question_code), q.question_code))


def question_lookup(questions: Iterable[QuestionScore]) -> Dict[str, QuestionScore]:
    """Index question records by id and by code; the first record wins."""

    index: Dict[str, QuestionScore] = {}
    for question in questions:
        index.setdefault(question.question_id, question)
        index.setdefault(question.question_code, question)
    return index


def lookup_question(index: Dict[str, QuestionScore], contribution: QuestionContribution) -> QuestionScore:
    found = index.get(contribution.question_id) or index.get(contribution.question_code)
    if found is not None:
        return found
    # Question may have been deleted from its question set after scoring.
    return QuestionScore(
        id=f"missing-{contribution.question_id}",
        source_id="",
        question_id=contribution.question_id,
        question_code=contribution.question_code,
        question_text=MISSING_QUESTION_TEXT,
        overall_score=contribution.score,
    )


def anchors_for_dimension(dimension: DimensionScore, rubric: Optional[QuestionRubric] = None) -> List[DimensionAnchor]:
    """Anchors carried on the score, else the rubric's, else none."""

    if dimension.anchors:
        return list(dimension.anchors)
    if rubric is None:
        return []
    for candidate in rubric.dimensions:
        if candidate.id == dimension.dimension_id or candidate.name == dimension.dimension_name:
            return list(candidate.anchors)
    return []


def anchor_for_level(anchors: Sequence[DimensionAnchor], level: int) -> DimensionAnchor:
    for anchor in anchors:
        if anchor.level == level:
            return anchor
    return DimensionAnchor(level=level, score_range="-", behavior=MISSING_ANCHOR_BEHAVIOR)


class InterviewRow(BaseModel):
    source_id: str
    name: str
    display_id: str
    question_count: int
    metric_count: int
    average_score: int
    flag_count: int
    tier: ScoreTier


class InterviewDetailView(BaseModel):
    source_id: str
    name: str
    display_id: str
    metrics: List[MetricScore] = Field(default_factory=list)
    questions: List[QuestionScore] = Field(default_factory=list)
    flags: FlagPartition = Field(default_factory=FlagPartition)
    average_score: int = 0
    rag_status: RagStatus = "red"
    confidence: ConfidenceLevel = "Low"
    top_performers: List[MetricScore] = Field(default_factory=list)
    bottom_performers: List[MetricScore] = Field(default_factory=list)


def interview_breakdown(run: RunDetail, scores: Optional[RunScores]) -> List[InterviewRow]:
    """One summary row per interview in the run, in source order."""

    metric_scores = scores.metric_scores if scores else []
    question_scores = scores.question_scores if scores else []
    rows: List[InterviewRow] = []
    for source in run.sources:
        metrics = metrics_for_interview(metric_scores, source.id)
        avg = round_score(average_score(metrics))
        rows.append(
            InterviewRow(
                source_id=source.id,
                name=source.name or settings.UNKNOWN_SOURCE_LABEL,
                display_id=format_interview_id(source.id),
                question_count=len(questions_for_interview(question_scores, source.id)),
                metric_count=len(metrics),
                average_score=avg,
                flag_count=len(flags_for_interview(run.flags, source.id)),
                tier=score_tier(avg),
            )
        )
    return rows


def interview_detail(run: RunDetail, scores: Optional[RunScores], source_id: str) -> InterviewDetailView:
    """Drill-down view for a single interview of a run."""

    source = next((item for item in run.sources if item.id == source_id), None)
    metric_scores = scores.metric_scores if scores else []
    question_scores = scores.question_scores if scores else []

    metrics = sort_metrics_by_number(metrics_for_interview(metric_scores, source_id))
    avg = round_score(average_score(metrics))

    count = settings.PERFORMER_COUNT
    by_score = sorted(metrics, key=lambda metric: -(metric.overall_score or 0.0))
    top = by_score[:count] if count else []
    bottom = list(reversed(by_score[-count:])) if count else []

    return InterviewDetailView(
        source_id=source_id,
        name=(source.name if source and source.name else settings.UNKNOWN_SOURCE_LABEL),
        display_id=format_interview_id(source_id),
        metrics=metrics,
        questions=sort_questions_by_code(questions_for_interview(question_scores, source_id)),
        flags=partition_flags(flags_for_interview(run.flags, source_id)),
        average_score=avg,
        rag_status=interview_rag_status(avg),
        confidence=metrics_confidence(metrics),
        top_performers=top,
        bottom_performers=bottom,
    )


__all__ = [
    "metrics_for_interview",
    "questions_for_interview",
    "average_score",
    "round_score",
    "format_interview_id",
    "question_number",
    "sort_questions_by_code",
    "question_lookup",
    "lookup_question",
    "anchors_for_dimension",
    "anchor_for_level",
    "InterviewRow",
    "InterviewDetailView",
    "interview_breakdown",
    "interview_detail",
]
