"""Abstract data-loading and action interface consumed by the driver.

Implementations own transport, authentication and decoding. Every method
returns already-decoded records (plain dicts or the models in
``evaluations.types``); the driver validates them before use.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class AdminApi(ABC):
    """Read and write calls of the admin backend."""

    @abstractmethod
    async def get_businesses_with_reviews(self) -> List[Any]:
        """Businesses that own at least one review."""

    @abstractmethod
    async def get_business_reviews(self, business_id: str) -> Dict[str, Any]:
        """``{"business": ..., "pending": [...], "completed": [...]}``."""

    @abstractmethod
    async def get_assessment_evaluation_runs(self, assessment_id: str) -> List[Any]:
        """Run summaries for one assessment."""

    @abstractmethod
    async def get_evaluation_run(self, run_id: str) -> Any:
        """Run detail including ``sources`` and ``flags``."""

    @abstractmethod
    async def get_evaluation_scores(self, run_id: str) -> Any:
        """``{"metric_scores": [...], "question_scores": [...]}`` for a run."""

    @abstractmethod
    async def get_question_rubric(self, question_id: str) -> Any:
        """Dimensions and critical flags of a question."""

    @abstractmethod
    async def run_evaluation(self, assessment_id: str) -> Any:
        """Start a new run; returns at least ``{"run_id": ...}``."""

    @abstractmethod
    async def resolve_flag(self, flag_id: str, resolution: str) -> Any:
        """Mark a flag resolved with the reviewer's resolution text."""

    @abstractmethod
    async def approve_review(self, review_id: str) -> Any:
        """Approve a submitted review."""

    @abstractmethod
    async def revoke_review(self, review_id: str) -> Any:
        """Revoke a previous approval."""


__all__ = ["AdminApi"]
