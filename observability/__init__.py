"""Observability utilities for the evaluation drill-down engine."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
