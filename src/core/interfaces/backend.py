"""Backend service contracts, implemented by `adapters.backend_client` and by the test fakes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CandidateEvaluation, RecommendationsPayload


@runtime_checkable
class LearningService(Protocol):
    """Recommends learning actions and tracks an employee's learning plan.

    Design rules:
    - Every method is asynchronous because it does I/O.
    - Failures are raised (typically `BackendError`); a call either fully
      succeeds or has no effect.
    """

    async def fetch_recommendations(
        self,
        subject_id: str,
        top_skill_count: int,
        actions_per_skill: int,
    ) -> RecommendationsPayload:
        ...

    async def add_to_plan(self, subject_id: str, action_id: str) -> None:
        ...

    async def update_plan_status(self, plan_item_id: str, new_status: str) -> None:
        ...


@runtime_checkable
class ReadinessService(Protocol):
    """Scores candidate-to-project skill fit and creates assignments."""

    async def evaluate_candidates(self, project_id: str, top_n: int) -> list[CandidateEvaluation]:
        ...

    async def create_assignment(self, project_id: str, employee_id: str) -> None:
        ...
