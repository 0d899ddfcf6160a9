"""HTTP implementation of the learning and readiness service contracts.

Responsibility:
- Map each contract method to one REST call.
- Validate payloads into domain models at the edge.
- Turn every failure (HTTP status or transport) into `BackendError`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client, decode_body, raise_for_backend_error
from core.config import AppSettings
from core.domain.errors import BackendError
from core.domain.models import CandidateEvaluation, RecommendationsPayload
from core.interfaces.backend import LearningService, ReadinessService

logger = logging.getLogger(__name__)


class HttpBackend(LearningService, ReadinessService):
    """Both backend services behind one `httpx.AsyncClient`.

    Use as an async context manager, or pass a client you own.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpBackend":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
            self._owns_client = True
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = await self.client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            raise BackendError(str(exc) or exc.__class__.__name__) from exc
        raise_for_backend_error(response)
        return decode_body(response)

    # ---------- Learning ----------

    async def fetch_recommendations(
        self,
        subject_id: str,
        top_skill_count: int,
        actions_per_skill: int,
    ) -> RecommendationsPayload:
        data = await self._request(
            "GET",
            f"/learning/employees/{subject_id}/recommendations",
            params={"topSkillCount": top_skill_count, "actionsPerSkill": actions_per_skill},
        )
        return RecommendationsPayload.model_validate(data or {})

    async def add_to_plan(self, subject_id: str, action_id: str) -> None:
        await self._request(
            "POST",
            f"/learning/employees/{subject_id}/plan",
            json={"learningActionId": action_id},
        )

    async def update_plan_status(self, plan_item_id: str, new_status: str) -> None:
        await self._request(
            "PATCH",
            f"/learning/plan/{plan_item_id}",
            json={"status": new_status},
        )

    # ---------- Readiness ----------

    async def evaluate_candidates(self, project_id: str, top_n: int) -> list[CandidateEvaluation]:
        data = await self._request(
            "GET",
            f"/projects/{project_id}/candidates",
            params={"topN": top_n},
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendError("Unexpected evaluation payload (expected a list).", body=data)
        return [CandidateEvaluation.model_validate(item) for item in data]

    async def create_assignment(self, project_id: str, employee_id: str) -> None:
        await self._request(
            "POST",
            f"/projects/{project_id}/assignments",
            json={"employeeId": employee_id},
        )
