"""Navigation cursor for the evaluation drill-down."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, model_validator

from evaluations.types import RunDetail

Level = Literal["businesses", "assessments", "runs", "detail"]
DetailSubLevel = Literal["summary", "breakdown", "interview"]


class Selection(BaseModel):
    """Id and display name of a selected business or assessment."""

    id: str
    name: str = ""

    model_config = {"frozen": True}


class NavigationState(BaseModel):
    """Immutable view cursor; replace it, never mutate it."""

    level: Level = "businesses"
    selected_business: Optional[Selection] = None
    selected_assessment: Optional[Selection] = None
    selected_run: Optional[RunDetail] = None
    detail_sub_level: Optional[DetailSubLevel] = None
    selected_source_id: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> "NavigationState":
        if self.selected_assessment is not None and self.selected_business is None:
            raise ValueError("selected_assessment requires selected_business")
        if self.selected_run is not None and self.selected_assessment is None:
            raise ValueError("selected_run requires selected_assessment")
        if self.selected_source_id is not None and self.detail_sub_level != "interview":
            raise ValueError("selected_source_id requires detail_sub_level 'interview'")
        if self.level in ("assessments", "runs", "detail") and self.selected_business is None:
            raise ValueError(f"level '{self.level}' requires selected_business")
        if self.level in ("runs", "detail") and self.selected_assessment is None:
            raise ValueError(f"level '{self.level}' requires selected_assessment")
        if self.level != "detail" and self.detail_sub_level is not None:
            raise ValueError("detail_sub_level is only valid at level 'detail'")
        return self

    def evolve(self, **changes: Any) -> "NavigationState":
        """Return a validated copy with ``changes`` applied."""

        return NavigationState.model_validate({**dict(self), **changes})


class Crumb(BaseModel):
    label: str
    level: Optional[Level] = None  # None = not navigable
    active: bool = False


def breadcrumbs(state: NavigationState) -> List[Crumb]:
    crumbs = [Crumb(label="Evaluations", level="businesses", active=state.level == "businesses")]
    if state.selected_business is not None:
        crumbs.append(
            Crumb(
                label=state.selected_business.name,
                level="assessments",
                active=state.level == "assessments",
            )
        )
    if state.selected_assessment is not None:
        crumbs.append(
            Crumb(
                label=state.selected_assessment.name,
                level="runs",
                active=state.level == "runs",
            )
        )
    if state.selected_run is not None:
        crumbs.append(Crumb(label=f"Run #{state.selected_run.run_number}", active=True))
    return crumbs


__all__ = ["Level", "DetailSubLevel", "Selection", "NavigationState", "Crumb", "breadcrumbs"]
