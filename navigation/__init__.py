"""Drill-down navigation: immutable state, pure transitions and the async driver."""
from .collaborators import AdminApi
from .driver import NavigationDriver, ViewData
from .errors import ActionFailure, InvalidTransition, LoadFailure, NavigationError
from .state import Crumb, NavigationState, Selection, breadcrumbs
from .transitions import LoadIntent, Transition

__all__ = [
    "AdminApi",
    "NavigationDriver",
    "ViewData",
    "ActionFailure",
    "InvalidTransition",
    "LoadFailure",
    "NavigationError",
    "Crumb",
    "NavigationState",
    "Selection",
    "breadcrumbs",
    "LoadIntent",
    "Transition",
]
