from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from adapters.backend_client import HttpBackend
from adapters.http_client import build_async_client
from core.domain.errors import BackendError
from core.interfaces.backend import LearningService, ReadinessService
from core.services.errors import normalize_error

from fakes import make_candidate, make_recommendations


def _backend(settings, handler) -> HttpBackend:
    client = build_async_client(settings, transport=httpx.MockTransport(handler))
    return HttpBackend(settings, client=client)


def test_backend_satisfies_both_contracts(settings):
    backend = HttpBackend(settings)

    assert isinstance(backend, LearningService)
    assert isinstance(backend, ReadinessService)


def test_fetch_recommendations_sends_counts(settings):
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["params"] = dict(request.url.params)
        captured["ua"] = request.headers["user-agent"]
        return httpx.Response(200, json=make_recommendations(skills=2, actions=3, plan=1))

    async def scenario():
        async with _backend(settings, handler) as backend:
            return await backend.fetch_recommendations("e1", 10, 5)

    payload = asyncio.run(scenario())

    assert captured["method"] == "GET"
    assert captured["path"] == "/api/learning/employees/e1/recommendations"
    assert captured["params"] == {"topSkillCount": "10", "actionsPerSkill": "5"}
    assert captured["ua"] == settings.user_agent
    assert [a.id for a in payload.recommended_actions] == ["a0", "a1", "a2"]
    assert payload.my_plan[0].action_id == "a0"


def test_mutations_send_json_bodies(settings):
    seen: list[tuple[str, str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        seen.append((request.method, request.url.path, body))
        return httpx.Response(204)

    async def scenario():
        async with _backend(settings, handler) as backend:
            await backend.add_to_plan("e1", "a7")
            await backend.update_plan_status("p3", "Completed")
            await backend.create_assignment("P1", "e2")

    asyncio.run(scenario())

    assert seen == [
        ("POST", "/api/learning/employees/e1/plan", {"learningActionId": "a7"}),
        ("PATCH", "/api/learning/plan/p3", {"status": "Completed"}),
        ("POST", "/api/projects/P1/assignments", {"employeeId": "e2"}),
    ]


def test_evaluate_candidates_validates_payload(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["topN"] == "3"
        return httpx.Response(200, json=[make_candidate("e1", 0), make_candidate("e2", 1.5)])

    async def scenario():
        async with _backend(settings, handler) as backend:
            return await backend.evaluate_candidates("P1", 3)

    candidates = asyncio.run(scenario())

    assert [(c.employee_id, c.gap_score) for c in candidates] == [("e1", 0), ("e2", 1.5)]


def test_error_body_is_preserved(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=[{"message": "Invalid status"}, {"message": "Record locked"}])

    async def scenario():
        async with _backend(settings, handler) as backend:
            await backend.update_plan_status("p1", "Nope")

    with pytest.raises(BackendError) as info:
        asyncio.run(scenario())

    assert info.value.status_code == 400
    assert normalize_error(info.value) == "Invalid status, Record locked"


def test_non_json_error_body_is_text(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    async def scenario():
        async with _backend(settings, handler) as backend:
            await backend.evaluate_candidates("P1", 3)

    with pytest.raises(BackendError) as info:
        asyncio.run(scenario())

    assert info.value.body == "upstream down"
    assert normalize_error(info.value) == "HTTP 503 from GET /api/projects/P1/candidates"


def test_transport_failure_becomes_backend_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with _backend(settings, handler) as backend:
            await backend.add_to_plan("e1", "a1")

    with pytest.raises(BackendError) as info:
        asyncio.run(scenario())

    assert normalize_error(info.value) == "connection refused"


def test_unexpected_evaluation_shape_is_rejected(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "not a list"})

    async def scenario():
        async with _backend(settings, handler) as backend:
            await backend.evaluate_candidates("P1", 3)

    with pytest.raises(BackendError):
        asyncio.run(scenario())
