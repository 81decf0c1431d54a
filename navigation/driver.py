"""Async driver that executes load intents and commits navigation state.

The driver is the only place that holds mutable state. It runs on a single
event loop: a transition's loads run concurrently and the transition is
committed only when every load succeeded. Each dispatch takes a new
generation number; a load whose dispatch is no longer the latest one is
discarded when it completes, even if an identical load was requested since.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from config.registry import ADMIN_API_KEY, get_api
from config.settings import settings
from evaluations.aggregator import RunSummaryView, run_summary
from evaluations.ordering import sort_assessments, sort_businesses, sort_runs
from evaluations.selectors import InterviewDetailView, InterviewRow, interview_breakdown, interview_detail
from evaluations.types import (
    AssessmentItem,
    BusinessReviews,
    BusinessWithReviews,
    EvaluationTrigger,
    QuestionRubric,
    RunDetail,
    RunScores,
    RunSummary,
)
from navigation import transitions
from navigation.collaborators import AdminApi
from navigation.errors import ActionFailure, InvalidTransition, LoadFailure, NavigationError
from navigation.state import Crumb, Level, NavigationState, Selection, breadcrumbs
from navigation.transitions import LoadIntent, Transition
from observability import log_event, span

ErrorCallback = Callable[[NavigationError], None]


class ViewData(BaseModel):
    """Lists and scores backing the committed view."""

    businesses: List[BusinessWithReviews] = Field(default_factory=list)
    assessments: List[AssessmentItem] = Field(default_factory=list)
    runs: List[RunSummary] = Field(default_factory=list)
    scores: Optional[RunScores] = None


def _ignore_error(_: NavigationError) -> None:
    return None


class NavigationDriver:
    def __init__(
        self,
        api: Optional[AdminApi] = None,
        *,
        on_error: Optional[ErrorCallback] = None,
        state: Optional[NavigationState] = None,
    ) -> None:
        self.api: AdminApi = api if api is not None else get_api(ADMIN_API_KEY)
        self.on_error: ErrorCallback = on_error or _ignore_error
        self.state = state or NavigationState()
        self.data = ViewData()
        self.events: List[Dict[str, Any]] = []
        self.triggering: Optional[str] = None
        self._generation = 0
        self._inflight = 0
        self._action: Optional[str] = None

    @property
    def busy(self) -> bool:
        """True while a load or an action call is outstanding."""
        return self._inflight > 0 or self._action is not None

    # Navigation -------------------------------------------------------

    async def start(self) -> bool:
        return await self.dispatch(Transition(state=NavigationState(), intents=[transitions.load_businesses()]))

    async def select_business(self, business: Selection | dict) -> bool:
        return await self._navigate(transitions.select_business, business)

    async def select_assessment(self, assessment: Selection | dict) -> bool:
        return await self._navigate(transitions.select_assessment, assessment)

    async def select_run(self, run_id: str) -> bool:
        return await self._navigate(transitions.select_run, run_id)

    async def go_to_breakdown(self) -> bool:
        return await self._navigate(transitions.go_to_breakdown)

    async def go_to_interview_detail(self, source_id: str) -> bool:
        return await self._navigate(transitions.go_to_interview_detail, source_id)

    async def go_back(self) -> bool:
        return await self._navigate(transitions.go_back)

    async def jump_to(self, level: Level) -> bool:
        return await self._navigate(transitions.jump_to, level)

    async def refresh(self) -> bool:
        return await self._navigate(transitions.refresh)

    async def _navigate(self, build: Callable[..., Transition], *args: Any) -> bool:
        try:
            transition = build(self.state, *args)
        except InvalidTransition as exc:
            self._report(exc)
            return False
        return await self.dispatch(transition)

    async def dispatch(self, transition: Transition) -> bool:
        """Run the transition's loads, then commit it unless a later dispatch superseded it."""

        intents = tuple(transition.intents)
        log_event(
            "nav_transition",
            self._target_of(transition.state),
            level=transition.state.level,
            sub_level=transition.state.detail_sub_level,
            intent=[intent.kind for intent in intents],
        )
        # Every dispatch, loading or not, supersedes any load still pending.
        self._generation += 1
        generation = self._generation
        if not intents:
            self._commit(transition.state)
            return True

        self._inflight += 1
        try:
            payloads = await asyncio.gather(*(self._fetch(intent) for intent in intents))
        except LoadFailure as exc:
            if generation != self._generation:
                self._discard(intents, outcome="stale_failure")
                return False
            self._report(exc)
            return False
        finally:
            self._inflight -= 1

        if generation != self._generation:
            self._discard(intents, outcome="stale_result")
            return False

        self._apply(transition.state, intents, payloads)
        return True

    # Loading ----------------------------------------------------------

    async def _fetch(self, intent: LoadIntent) -> Any:
        log_event("nav_load", intent.target_id, intent=intent.kind)
        try:
            with span(self.events, f"load:{intent.kind}"):
                return await self._load(intent)
        except Exception as exc:
            raise LoadFailure(intent.kind, intent.target_id, str(exc)) from exc

    async def _load(self, intent: LoadIntent) -> Any:
        if intent.kind == "businesses":
            raw = await self.api.get_businesses_with_reviews()
            return sort_businesses(BusinessWithReviews.model_validate(item) for item in raw or [])
        if intent.kind == "assessments":
            raw = await self.api.get_business_reviews(intent.target_id)
            return sort_assessments(BusinessReviews.model_validate(raw or {}))
        if intent.kind == "runs":
            raw = await self.api.get_assessment_evaluation_runs(intent.target_id)
            return sort_runs(RunSummary.model_validate(item) for item in raw or [])
        # Fan-out; gather raises on the first failure so nothing is committed.
        detail_raw, scores_raw = await asyncio.gather(
            self.api.get_evaluation_run(intent.target_id),
            self.api.get_evaluation_scores(intent.target_id),
        )
        return RunDetail.model_validate(detail_raw), RunScores.model_validate(scores_raw)

    async def fetch_question_rubric(self, question_id: str) -> Optional[QuestionRubric]:
        """Rubric for dimension anchors; ``None`` after reporting a failure."""

        try:
            raw = await self.api.get_question_rubric(question_id)
            return QuestionRubric.model_validate(raw)
        except Exception as exc:
            self._report(LoadFailure("rubric", question_id, str(exc)))
            return None

    # Committing -------------------------------------------------------

    def _apply(self, target: NavigationState, intents: Sequence[LoadIntent], payloads: Sequence[Any]) -> None:
        state = target
        for intent, payload in zip(intents, payloads):
            if intent.kind == "businesses":
                self.data.businesses = payload
            elif intent.kind == "assessments":
                self.data.assessments = payload
            elif intent.kind == "runs":
                self.data.runs = payload
            else:
                detail, scores = payload
                state = target.evolve(selected_run=detail)
                self.data.scores = scores
        self._commit(state)

    def _commit(self, state: NavigationState) -> None:
        self.state = state
        if state.level != "detail":
            self.data.scores = None
        log_event(
            "nav_commit",
            self._target_of(state),
            level=state.level,
            sub_level=state.detail_sub_level,
        )

    def _discard(self, intents: Sequence[LoadIntent], *, outcome: str) -> None:
        for intent in intents:
            log_event("nav_stale_discard", intent.target_id, intent=intent.kind, outcome=outcome)

    def _report(self, exc: NavigationError) -> None:
        log_event(
            "nav_error",
            self._target_of(self.state),
            log_level=logging.WARNING,
            level=self.state.level,
            error=str(exc),
            reason=getattr(exc, "reason", None),
        )
        self.on_error(exc)

    @staticmethod
    def _target_of(state: NavigationState) -> Optional[str]:
        if state.selected_run is not None:
            return state.selected_run.id
        if state.selected_assessment is not None:
            return state.selected_assessment.id
        if state.selected_business is not None:
            return state.selected_business.id
        return None

    # Actions ----------------------------------------------------------

    async def _act(self, action: str, call: Callable[[], Awaitable[Any]]) -> Any:
        """Await one write call; failures become ``ActionFailure``, never retried."""

        self._action = action
        log_event("nav_action", self._target_of(self.state), action=action)
        try:
            return await call()
        except Exception as exc:
            raise ActionFailure(action, str(exc)) from exc
        finally:
            self._action = None

    async def trigger_evaluation(self, assessment_id: str) -> bool:
        """Start a run, reload the affected list and open the new run."""

        self.triggering = assessment_id
        try:
            raw = await self._act("trigger_evaluation", lambda: self.api.run_evaluation(assessment_id))
            trigger = EvaluationTrigger.model_validate(raw or {})
        except ValidationError as exc:
            self._report(ActionFailure("trigger_evaluation", str(exc)))
            return False
        except ActionFailure as exc:
            self._report(exc)
            return False
        finally:
            self.triggering = None

        on_runs = (
            self.state.level == "runs"
            and self.state.selected_assessment is not None
            and self.state.selected_assessment.id == assessment_id
        )
        reloaded = await self.refresh()
        if on_runs and reloaded and trigger.run_id and settings.OPEN_TRIGGERED_RUN:
            return await self.select_run(trigger.run_id)
        return reloaded

    async def resolve_flag(self, flag_id: str, resolution: str) -> bool:
        """Resolve a flag, then reload the owning run detail."""

        if self.state.selected_run is None:
            self._report(InvalidTransition("No run loaded"))
            return False
        try:
            await self._act("resolve_flag", lambda: self.api.resolve_flag(flag_id, resolution))
        except ActionFailure as exc:
            self._report(exc)
            return False
        return await self.refresh()

    async def approve_review(self, review_id: str) -> bool:
        return await self._review_action("approve_review", review_id)

    async def revoke_review(self, review_id: str) -> bool:
        return await self._review_action("revoke_review", review_id)

    async def _review_action(self, action: str, review_id: str) -> bool:
        call = self.api.approve_review if action == "approve_review" else self.api.revoke_review
        try:
            await self._act(action, lambda: call(review_id))
        except ActionFailure as exc:
            self._report(exc)
            return False
        return await self.refresh()

    # Views ------------------------------------------------------------

    def breadcrumbs(self) -> List[Crumb]:
        return breadcrumbs(self.state)

    def summary_view(self) -> Optional[RunSummaryView]:
        if self.state.level != "detail" or self.state.selected_run is None:
            return None
        return run_summary(self.state.selected_run, self.data.scores)

    def breakdown_view(self) -> List[InterviewRow]:
        if self.state.level != "detail" or self.state.selected_run is None:
            return []
        return interview_breakdown(self.state.selected_run, self.data.scores)

    def interview_view(self) -> Optional[InterviewDetailView]:
        source_id = self.state.selected_source_id
        if self.state.selected_run is None or source_id is None:
            return None
        return interview_detail(self.state.selected_run, self.data.scores, source_id)


__all__ = ["ViewData", "NavigationDriver"]
