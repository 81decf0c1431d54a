"""Shared record definitions for evaluation runs and their scores."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

FlagSeverity = Literal["critical", "warning", "info"]


class BusinessWithReviews(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    status: Optional[str] = None
    pending_reviews: int = 0
    completed_reviews: int = 0
    total_reviews: int = 0
    has_pending: bool = False
    most_recent_pending: Optional[str] = None
    latest_evaluation_at: Optional[str] = None
    evaluated_reviews: Optional[int] = None


class ReviewStats(BaseModel):
    total_invited: int = 0
    total_started: int = 0
    total_completed: int = 0
    total_submitted: int = 0


class AssessmentItem(BaseModel):
    id: str
    name: str
    status: str = "draft"
    goal: Optional[str] = None
    question_set_id: Optional[str] = None
    question_set_name: Optional[str] = None
    stats: ReviewStats = Field(default_factory=ReviewStats)
    interview_count: int = 0
    evaluated_at: Optional[str] = None
    submitted_at: Optional[str] = None
    created_at: Optional[str] = None


class BusinessReviews(BaseModel):
    business: Dict[str, Any] = Field(default_factory=dict)
    pending: List[AssessmentItem] = Field(default_factory=list)
    completed: List[AssessmentItem] = Field(default_factory=list)


class RunSummary(BaseModel):
    id: str
    run_number: int
    status: str
    assessment_id: Optional[str] = None
    average_metric_score: Optional[float] = None
    total_flags: int = 0
    unresolved_flags: int = 0
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None


class Source(BaseModel):
    id: str
    name: str = ""
    source_type: str = "interview"
    reference_id: Optional[str] = None


class DimensionAnchor(BaseModel):
    level: int
    score_range: str = ""
    behavior: str = ""


class DimensionScore(BaseModel):
    dimension_id: Optional[str] = None
    dimension_name: str
    description: Optional[str] = None
    weight: Optional[float] = None
    anchors: List[DimensionAnchor] = Field(default_factory=list)
    score: Optional[float] = Field(default=None, ge=1.0, le=5.0)
    confidence: Optional[str] = None
    reasoning: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _drop_unusable_score(cls, value: object) -> Optional[float]:  # Unscored or off-scale reads as unscored
        try:
            numeric = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return numeric if 1.0 <= numeric <= 5.0 else None


class CheckResult(BaseModel):
    id: str
    check_type: str
    primary_question_code: str
    linked_question_code: str
    interdependency_description: str = ""
    primary_score: Optional[float] = None
    linked_score: Optional[float] = None
    passed: bool
    reasoning: str = ""
    flag_id: Optional[str] = None


class QuestionScore(BaseModel):
    id: str
    source_id: str
    question_id: str
    question_code: str
    question_text: Optional[str] = None
    overall_score: Optional[float] = None
    dimension_scores: List[DimensionScore] = Field(default_factory=list)
    check_results: List[CheckResult] = Field(default_factory=list)
    confidence: Optional[str] = None
    response_quality: Optional[str] = None
    scoring_reasoning: Optional[str] = None
    requires_review: bool = False


class QuestionContribution(BaseModel):
    question_id: str
    question_code: str = ""
    score: float = 0.0
    weight: float = 0.0
    weighted_contribution: float = 0.0


class MetricScore(BaseModel):
    id: str
    run_id: Optional[str] = None
    source_id: Optional[str] = None  # None = pre-aggregated across all sources
    metric_id: Optional[str] = None
    metric_code: str
    metric_name: Optional[str] = None
    overall_score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    question_contributions: List[QuestionContribution] = Field(default_factory=list)
    confidence: Optional[str] = None
    interpretation: Optional[str] = None


class Flag(BaseModel):
    id: str
    flag_type: Optional[str] = None
    severity: FlagSeverity = "info"
    title: str = ""
    description: Optional[str] = None
    source_ids: List[str] = Field(default_factory=list)
    question_ids: List[str] = Field(default_factory=list)
    ai_explanation: Optional[str] = None
    requires_review: bool = False
    is_resolved: bool = False
    resolution: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[str] = None
    created_at: Optional[str] = None


class RunDetail(BaseModel):
    id: str
    run_number: int
    status: str
    assessment_id: Optional[str] = None
    triggered_by: Optional[str] = None
    sources: List[Source] = Field(default_factory=list)
    flags: List[Flag] = Field(default_factory=list)
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None


class RunScores(BaseModel):
    run_id: Optional[str] = None
    metric_scores: List[MetricScore] = Field(default_factory=list)
    question_scores: List[QuestionScore] = Field(default_factory=list)


class RubricDimension(BaseModel):
    id: str
    name: str
    description: str = ""
    weight: float = 0.0
    anchors: List[DimensionAnchor] = Field(default_factory=list)


class QuestionRubric(BaseModel):
    question_id: str
    dimensions: List[RubricDimension] = Field(default_factory=list)
    critical_flags: List[Dict[str, Any]] = Field(default_factory=list)


class EvaluationTrigger(BaseModel):
    run_id: Optional[str] = None
    run_number: Optional[int] = None
    status: Optional[str] = None
    message: Optional[str] = None
