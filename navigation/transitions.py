"""Pure transition functions for the drill-down state machine.

Every function takes the current ``NavigationState`` and returns a
``Transition``: the state to commit plus the loads that must succeed before
it may be committed. Nothing here performs I/O.
"""
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from navigation.errors import InvalidTransition
from navigation.state import Level, NavigationState, Selection

IntentKind = Literal["businesses", "assessments", "runs", "run_detail"]

SelectionLike = Union[Selection, dict]


class LoadIntent(BaseModel):
    kind: IntentKind
    target_id: Optional[str] = None

    model_config = {"frozen": True}


class Transition(BaseModel):
    state: NavigationState
    intents: List[LoadIntent] = Field(default_factory=list)


def load_businesses() -> LoadIntent:
    return LoadIntent(kind="businesses")


def load_assessments(business_id: str) -> LoadIntent:
    return LoadIntent(kind="assessments", target_id=business_id)


def load_runs(assessment_id: str) -> LoadIntent:
    return LoadIntent(kind="runs", target_id=assessment_id)


def load_run_detail(run_id: str) -> LoadIntent:
    return LoadIntent(kind="run_detail", target_id=run_id)


def _require(state: NavigationState, level: Level, action: str, sub_level: Optional[str] = None) -> None:
    if state.level != level or (sub_level is not None and state.detail_sub_level != sub_level):
        where = f"{state.level}.{state.detail_sub_level}" if state.detail_sub_level else state.level
        raise InvalidTransition(f"Cannot {action} from '{where}'")


def _selection(value: SelectionLike) -> Selection:
    return value if isinstance(value, Selection) else Selection.model_validate(value)


def select_business(state: NavigationState, business: SelectionLike) -> Transition:
    _require(state, "businesses", "select a business")
    chosen = _selection(business)
    return Transition(
        state=NavigationState(level="assessments", selected_business=chosen),
        intents=[load_assessments(chosen.id)],
    )


def select_assessment(state: NavigationState, assessment: SelectionLike) -> Transition:
    _require(state, "assessments", "select an assessment")
    chosen = _selection(assessment)
    return Transition(
        state=state.evolve(level="runs", selected_assessment=chosen),
        intents=[load_runs(chosen.id)],
    )


def select_run(state: NavigationState, run_id: str) -> Transition:
    """Open a run; ``selected_run`` is filled from the loaded detail on commit."""

    _require(state, "runs", "open a run")
    return Transition(
        state=state.evolve(
            level="detail",
            selected_run=None,
            detail_sub_level="summary",
            selected_source_id=None,
        ),
        intents=[load_run_detail(run_id)],
    )


def go_to_breakdown(state: NavigationState) -> Transition:
    _require(state, "detail", "open the interview breakdown", sub_level="summary")
    return Transition(state=state.evolve(detail_sub_level="breakdown"))


def go_to_interview_detail(state: NavigationState, source_id: str) -> Transition:
    _require(state, "detail", "open an interview", sub_level="breakdown")
    return Transition(state=state.evolve(detail_sub_level="interview", selected_source_id=source_id))


def go_back(state: NavigationState) -> Transition:
    """Inverse of the forward transition that reached the current view."""

    if state.level == "detail":
        if state.detail_sub_level == "interview":
            return Transition(state=state.evolve(detail_sub_level="breakdown", selected_source_id=None))
        if state.detail_sub_level == "breakdown":
            return Transition(state=state.evolve(detail_sub_level="summary"))
        if state.selected_assessment is None:
            raise InvalidTransition("No assessment selected")
        return Transition(
            state=state.evolve(
                level="runs",
                selected_run=None,
                detail_sub_level=None,
                selected_source_id=None,
            ),
            intents=[load_runs(state.selected_assessment.id)],
        )
    if state.level == "runs":
        if state.selected_business is None:
            raise InvalidTransition("No business selected")
        return Transition(
            state=state.evolve(level="assessments", selected_assessment=None),
            intents=[load_assessments(state.selected_business.id)],
        )
    if state.level == "assessments":
        return Transition(state=NavigationState(), intents=[load_businesses()])
    return Transition(state=state)


def jump_to(state: NavigationState, level: Level) -> Transition:
    """Breadcrumb jump to an ancestor list; the list is always re-fetched."""

    if level == "businesses":
        return Transition(state=NavigationState(), intents=[load_businesses()])
    if level == "assessments":
        if state.selected_business is None:
            raise InvalidTransition("No business selected")
        return Transition(
            state=NavigationState(level="assessments", selected_business=state.selected_business),
            intents=[load_assessments(state.selected_business.id)],
        )
    if level == "runs":
        if state.selected_business is None or state.selected_assessment is None:
            raise InvalidTransition("No assessment selected")
        return Transition(
            state=NavigationState(
                level="runs",
                selected_business=state.selected_business,
                selected_assessment=state.selected_assessment,
            ),
            intents=[load_runs(state.selected_assessment.id)],
        )
    raise InvalidTransition(f"Cannot jump to '{level}'")


def refresh(state: NavigationState) -> Transition:
    """Reload whatever the current view shows, keeping the cursor as is."""

    if state.level == "businesses":
        return Transition(state=state, intents=[load_businesses()])
    if state.level == "assessments":
        if state.selected_business is None:
            raise InvalidTransition("No business selected")
        return Transition(state=state, intents=[load_assessments(state.selected_business.id)])
    if state.level == "runs":
        if state.selected_assessment is None:
            raise InvalidTransition("No assessment selected")
        return Transition(state=state, intents=[load_runs(state.selected_assessment.id)])
    if state.selected_run is None:
        raise InvalidTransition("No run loaded")
    return Transition(state=state, intents=[load_run_detail(state.selected_run.id)])


__all__ = [
    "IntentKind",
    "LoadIntent",
    "Transition",
    "load_businesses",
    "load_assessments",
    "load_runs",
    "load_run_detail",
    "select_business",
    "select_assessment",
    "select_run",
    "go_to_breakdown",
    "go_to_interview_detail",
    "go_back",
    "jump_to",
    "refresh",
]
