from __future__ import annotations

import asyncio

from core.domain.errors import BackendError
from core.interfaces.notifier import Severity
from core.services.readiness_view import (
    NO_CANDIDATES_MESSAGE,
    NO_EMPLOYEE_MESSAGE,
    NO_PROJECT_MESSAGE,
    ProjectReadinessView,
)

from fakes import FakeReadinessService, make_candidate


def _candidates():
    return [
        make_candidate("e1", 0),
        make_candidate("e2", 0.0001, deficitsBySkill={"Kotlin": 0.0001}),
        make_candidate("e3", 3, deficitsBySkill={"SQL": 2, "Go": 1}, details="Missing SQL"),
    ]


def test_evaluate_projects_candidates(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    asyncio.run(view.evaluate())

    assert service.calls == [("evaluate_candidates", "P1", 10)]
    assert view.has_results is True
    assert [c.is_ready for c in view.candidates] == [True, False, False]
    assert view.candidates[2].has_deficits is True
    assert view.loading is False
    assert notifier.messages == []


def test_evaluate_without_project_makes_no_call(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings)

    asyncio.run(view.evaluate())

    assert service.calls == []
    assert notifier.messages == [("Error", NO_PROJECT_MESSAGE, Severity.ERROR)]


def test_empty_result_emits_info(settings, notifier):
    view = ProjectReadinessView(FakeReadinessService([]), notifier, settings, project_id="P1")

    asyncio.run(view.evaluate())

    assert view.has_results is False
    assert notifier.messages == [("Info", NO_CANDIDATES_MESSAGE, Severity.INFO)]


def test_evaluation_failure_is_inline(settings, notifier):
    service = FakeReadinessService()
    service.fetch_error = BackendError("HTTP 500", body=[{"message": "Too many SOQL queries"}])
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    state = asyncio.run(view.evaluate())

    assert state.is_error
    assert view.error == "Too many SOQL queries"
    assert notifier.messages == []


def test_same_params_keep_details_new_top_n_resets(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    async def scenario():
        await view.evaluate()
        view.toggle_details("e3")
        await view.evaluate()
        kept = view.candidates[2].expanded
        await view.evaluate(top_n=2)
        return kept

    kept = asyncio.run(scenario())

    assert kept is True
    assert [c.employee_id for c in view.candidates] == ["e1", "e2"]
    assert all(not c.expanded for c in view.candidates)
    assert [call[2] for call in service.calls] == [10, 10, 2]


def test_toggle_details_flips_one_candidate(settings, notifier):
    view = ProjectReadinessView(FakeReadinessService(_candidates()), notifier, settings, project_id="P1")
    asyncio.run(view.evaluate())
    before = view.candidates

    view.toggle_details("e2")
    view.toggle_details(None)

    assert [c.expanded for c in view.candidates] == [False, True, False]
    assert view.candidates[1].details_icon == "utility:chevrondown"
    assert before[1].expanded is False
    assert view.candidates[0] is before[0]


def test_assign_without_employee_makes_no_call(settings, notifier):
    service = FakeReadinessService(_candidates())
    transitions: list[bool] = []
    view = ProjectReadinessView(
        service,
        notifier,
        settings,
        project_id="P1",
        on_loading=transitions.append,
    )

    outcome = asyncio.run(view.assign(None))

    assert outcome.ok is False
    assert service.calls == []
    assert notifier.messages == [("Error", NO_EMPLOYEE_MESSAGE, Severity.ERROR)]
    assert transitions == []
    assert view.loading is False


def test_assign_refreshes_loaded_evaluation(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    async def scenario():
        await view.evaluate()
        view.toggle_details("e1")
        return await view.assign("e1")

    outcome = asyncio.run(scenario())

    assert outcome.ok is True
    assert [c[0] for c in service.calls] == ["evaluate_candidates", "create_assignment", "evaluate_candidates"]
    assert view.candidates[0].expanded is True
    assert notifier.messages == [("Success", "Assignment created.", Severity.SUCCESS)]


def test_assign_before_evaluation_skips_refresh(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    outcome = asyncio.run(view.assign("e2"))

    assert outcome.ok is True
    assert outcome.warnings == ()
    assert service.calls == [("create_assignment", "P1", "e2")]


def test_assign_failure_notifies_error(settings, notifier):
    service = FakeReadinessService(_candidates())
    service.mutation_error = BackendError("HTTP 400", body={"message": "Employee already assigned"})
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    outcome = asyncio.run(view.assign("e2"))

    assert outcome.ok is False
    assert notifier.messages == [("Error", "Employee already assigned", Severity.ERROR)]
    assert view.loading is False


def test_assign_during_top_n_change_still_resets_details(settings, notifier):
    service = FakeReadinessService(_candidates())
    view = ProjectReadinessView(service, notifier, settings, project_id="P1")

    async def scenario():
        await view.evaluate()
        view.toggle_details("e1")

        gate = asyncio.Event()
        service.gates[2] = gate
        resize = asyncio.create_task(view.evaluate(top_n=2))
        await asyncio.sleep(0)
        outcome = await view.assign("e2")
        gate.set()
        await resize
        return outcome

    outcome = asyncio.run(scenario())

    assert outcome.ok is True
    assert [c.employee_id for c in view.candidates] == ["e1", "e2"]
    assert all(not c.expanded for c in view.candidates)
