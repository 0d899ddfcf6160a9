from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from core.domain.errors import BackendError

from fakes import FakeLearningService, FakeReadinessService, make_candidate, make_recommendations

runner = CliRunner()


class FakeBackend(FakeLearningService, FakeReadinessService):
    """Both fakes behind the async-context-manager shape of `HttpBackend`."""

    instances: list["FakeBackend"] = []

    def __init__(self, settings=None) -> None:
        FakeLearningService.__init__(self, make_recommendations(skills=4, actions=6, plan=1))
        FakeReadinessService.__init__(self, [make_candidate("e1", 0), make_candidate("e2", 2, deficitsBySkill={"SQL": 2})])
        self.calls = []
        FakeBackend.instances.append(self)

    async def __aenter__(self) -> "FakeBackend":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


@pytest.fixture(autouse=True)
def fake_backend(monkeypatch):
    FakeBackend.instances = []
    monkeypatch.setattr(cli_main, "HttpBackend", FakeBackend)
    monkeypatch.setenv("SKILLSYNC_API_BASE_URL", "http://backend.test/api")
    return FakeBackend


def test_learning_show_renders_tables():
    result = runner.invoke(cli_main.app, ["learning", "show", "e1"])

    assert result.exit_code == 0, result.output
    assert "Skill 0" in result.output
    assert "Course 0" in result.output
    assert FakeBackend.instances[0].calls == [("fetch_recommendations", "e1", 10, 5)]


def test_learning_show_writes_json(tmp_path):
    out = tmp_path / "recs.json"

    result = runner.invoke(cli_main.app, ["learning", "show", "e1", "--json-out", str(out)])

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["employee_id"] == "e1"
    assert len(data["recommended_actions"]) == 6


def test_learning_status_rejects_unknown_status():
    result = runner.invoke(cli_main.app, ["learning", "status", "p0", "Finished", "-e", "e1"])

    assert result.exit_code == 1
    assert [c[0] for c in FakeBackend.instances[0].calls] == ["fetch_recommendations"]


def test_learning_add_calls_backend_and_refreshes():
    result = runner.invoke(cli_main.app, ["learning", "add", "e1", "a2"])

    assert result.exit_code == 0, result.output
    assert [c[0] for c in FakeBackend.instances[0].calls] == [
        "fetch_recommendations",
        "add_to_plan",
        "fetch_recommendations",
    ]
    assert "Added" in result.output


def test_readiness_evaluate_lists_candidates():
    result = runner.invoke(cli_main.app, ["readiness", "evaluate", "P1", "--top-n", "5"])

    assert result.exit_code == 0, result.output
    assert "Employee e1" in result.output
    assert "Employee e2" in result.output
    assert FakeBackend.instances[0].calls == [("evaluate_candidates", "P1", 5)]


def test_readiness_assign_failure_exits_nonzero(monkeypatch):
    original_init = FakeBackend.__init__

    def failing_init(self, settings=None):
        original_init(self, settings)
        self.mutation_error = BackendError("HTTP 400", body={"message": "Already assigned"})

    monkeypatch.setattr(FakeBackend, "__init__", failing_init)

    result = runner.invoke(cli_main.app, ["readiness", "assign", "P1", "e2"])

    assert result.exit_code == 1
    assert "Already assigned" in result.output
