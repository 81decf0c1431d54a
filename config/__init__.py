"""Configuration package for the evaluation drill-down engine."""
from .registry import ADMIN_API_KEY, bind_api, get_api, unbind_api
from .settings import Settings, settings

__all__ = [
    "ADMIN_API_KEY",
    "bind_api",
    "get_api",
    "unbind_api",
    "Settings",
    "settings",
]
