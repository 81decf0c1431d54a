"""Errors surfaced by the navigation driver through its error callback."""
from __future__ import annotations

from typing import Optional

_RESOURCE_LABELS = {
    "businesses": "businesses",
    "assessments": "assessments",
    "runs": "evaluation runs",
    "run_detail": "evaluation details",
    "rubric": "question rubric",
}

_ACTION_LABELS = {
    "trigger_evaluation": "trigger evaluation",
    "resolve_flag": "resolve flag",
    "approve_review": "approve review",
    "revoke_review": "revoke review",
}


class NavigationError(Exception):
    """Base class; ``str(err)`` is the message shown to the user."""


class InvalidTransition(NavigationError):
    pass


class LoadFailure(NavigationError):
    def __init__(self, resource: str, target_id: Optional[str], reason: str) -> None:
        self.resource = resource
        self.target_id = target_id
        self.reason = reason
        super().__init__(f"Failed to load {_RESOURCE_LABELS.get(resource, resource)}")


class ActionFailure(NavigationError):
    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"Failed to {_ACTION_LABELS.get(action, action)}")


__all__ = ["NavigationError", "InvalidTransition", "LoadFailure", "ActionFailure"]
