import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import ADMIN_API_KEY, bind_api, unbind_api
from navigation.collaborators import AdminApi


class FakeAdminApi(AdminApi):
    """In-memory backend recording every call.

    ``fail`` names methods that raise; ``gates`` holds an ``asyncio.Event``
    per ``(method, id)`` that the next such call waits on before returning.
    """

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail: set[str] = set()
        self.gates: Dict[tuple, asyncio.Event] = {}
        self.businesses: List[Dict[str, Any]] = [
            {"id": "b1", "name": "Acme", "latest_evaluation_at": "2025-01-02T10:00:00Z"},
            {"id": "b2", "name": "Globex", "most_recent_pending": "2025-03-01T09:00:00Z"},
        ]
        self.reviews: Dict[str, Dict[str, Any]] = {
            "b1": {
                "business": {"id": "b1", "name": "Acme"},
                "pending": [{"id": "a1", "name": "Q1 review", "status": "submitted", "created_at": "2025-01-01"}],
                "completed": [{"id": "a2", "name": "Q2 review", "status": "evaluated", "evaluated_at": "2025-02-01"}],
            }
        }
        self.runs: Dict[str, List[Dict[str, Any]]] = {
            "a1": [
                {"id": "r1", "run_number": 1, "status": "completed", "created_at": "2025-01-05"},
                {"id": "r2", "run_number": 2, "status": "completed", "created_at": "2025-01-06"},
            ]
        }
        self.details: Dict[str, Dict[str, Any]] = {
            "r1": {
                "id": "r1",
                "run_number": 1,
                "status": "completed",
                "sources": [{"id": "s1", "name": "Alice"}, {"id": "s2", "name": "Bob"}],
                "flags": [
                    {"id": "f1", "severity": "warning", "source_ids": ["s1"], "question_ids": ["q1"]},
                ],
            },
            "r2": {"id": "r2", "run_number": 2, "status": "completed", "sources": [], "flags": []},
        }
        self.scores: Dict[str, Dict[str, Any]] = {
            "r1": {
                "run_id": "r1",
                "metric_scores": [
                    {"id": "m1", "source_id": "s1", "metric_code": "M1", "overall_score": 80, "confidence": "high"},
                    {"id": "m2", "source_id": "s2", "metric_code": "M1", "overall_score": 60, "confidence": "low"},
                ],
                "question_scores": [],
            },
            "r2": {"run_id": "r2", "metric_scores": [], "question_scores": []},
        }
        self.next_run_id = "r3"

    async def _call(self, method: str, key: Optional[str] = None) -> None:
        self.calls.append((method, key))
        gate = self.gates.pop((method, key), None)
        if gate is not None:
            await gate.wait()
        if method in self.fail:
            raise RuntimeError(f"{method} unavailable")

    async def get_businesses_with_reviews(self):
        await self._call("get_businesses_with_reviews")
        return list(self.businesses)

    async def get_business_reviews(self, business_id):
        await self._call("get_business_reviews", business_id)
        return self.reviews.get(business_id, {"pending": [], "completed": []})

    async def get_assessment_evaluation_runs(self, assessment_id):
        await self._call("get_assessment_evaluation_runs", assessment_id)
        return list(self.runs.get(assessment_id, []))

    async def get_evaluation_run(self, run_id):
        await self._call("get_evaluation_run", run_id)
        return self.details[run_id]

    async def get_evaluation_scores(self, run_id):
        await self._call("get_evaluation_scores", run_id)
        return self.scores[run_id]

    async def get_question_rubric(self, question_id):
        await self._call("get_question_rubric", question_id)
        return {
            "question_id": question_id,
            "dimensions": [
                {"id": "d1", "name": "Clarity", "anchors": [{"level": 3, "score_range": "40-60", "behavior": "ok"}]}
            ],
        }

    async def run_evaluation(self, assessment_id):
        await self._call("run_evaluation", assessment_id)
        run_id = self.next_run_id
        self.runs.setdefault(assessment_id, []).append(
            {"id": run_id, "run_number": 3, "status": "processing", "created_at": "2025-01-07"}
        )
        self.details[run_id] = {"id": run_id, "run_number": 3, "status": "processing"}
        self.scores[run_id] = {"run_id": run_id}
        return {"run_id": run_id, "run_number": 3, "status": "processing"}

    async def resolve_flag(self, flag_id, resolution):
        await self._call("resolve_flag", flag_id)
        for detail in self.details.values():
            for flag in detail.get("flags", []):
                if flag["id"] == flag_id:
                    flag["is_resolved"] = True
                    flag["resolution"] = resolution
        return {"message": "resolved"}

    async def approve_review(self, review_id):
        await self._call("approve_review", review_id)
        return {"message": "approved"}

    async def revoke_review(self, review_id):
        await self._call("revoke_review", review_id)
        return {"message": "revoked"}

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)


@pytest.fixture
def fake_api():
    api = FakeAdminApi()
    bind_api(ADMIN_API_KEY, api)
    try:
        yield api
    finally:
        unbind_api(ADMIN_API_KEY)
