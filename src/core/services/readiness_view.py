"""Project readiness screen: scored candidates and assignment creation."""

from __future__ import annotations

import logging
from collections.abc import Callable

from core.config import AppSettings
from core.domain.models import CandidateEvaluation, CandidateItem
from core.domain.state import MutationOutcome, SubscriptionState, Trigger
from core.interfaces.backend import ReadinessService
from core.interfaces.notifier import Notifier, Severity
from core.services.mutation import MutationCoordinator, Notice
from core.services.projection import candidate_key, index_by_key, project_candidates, toggle_expanded
from core.services.subscription import Params, SubscriptionCache

logger = logging.getLogger(__name__)

NO_PROJECT_MESSAGE = "No project selected (project id is missing)."
NO_EMPLOYEE_MESSAGE = "Employee Id missing from action."
NO_CANDIDATES_MESSAGE = (
    "No candidates returned. Ensure the project has skill requirements and employees have skills."
)


class ProjectReadinessView:
    def __init__(
        self,
        service: ReadinessService,
        notifier: Notifier,
        settings: AppSettings | None = None,
        *,
        project_id: str | None = None,
        on_loading: Callable[[bool], None] | None = None,
    ) -> None:
        self._service = service
        self._notifier = notifier
        self._settings = settings or AppSettings()

        self.project_id = project_id
        self.top_n = self._settings.evaluation_top_n
        self.error: str | None = None
        self._candidates: list[CandidateItem] = []

        self.mutations = MutationCoordinator(notifier, on_loading=on_loading)
        self.evaluation: SubscriptionCache[list[CandidateEvaluation]] = SubscriptionCache(
            self._fetch,
            name="evaluation",
        )
        self._unsubscribe = self.evaluation.add_listener(self._on_state)

    async def _fetch(self, params: Params) -> list[CandidateEvaluation]:
        return await self._service.evaluate_candidates(
            project_id=params["project_id"],
            top_n=params["top_n"],
        )

    def _on_state(self, state: SubscriptionState[list[CandidateEvaluation]]) -> None:
        if state.is_error and state.error is not None:
            self.error = state.error.message
            logger.debug("evaluation of %s failed: %s", self.project_id, self.error)
            return
        if not state.is_data:
            return

        self.error = None
        previous = None
        if state.trigger is Trigger.INVALIDATE:
            previous = index_by_key(self._candidates, candidate_key)
        self._candidates = project_candidates(state.data, previous)

    @property
    def candidates(self) -> list[CandidateItem]:
        return self._candidates

    @property
    def has_results(self) -> bool:
        return len(self._candidates) > 0

    @property
    def loading(self) -> bool:
        evaluating = self.evaluation.params is not None and self.evaluation.state.is_pending
        return evaluating or self.mutations.loading

    async def evaluate(self, top_n: int | None = None) -> SubscriptionState[list[CandidateEvaluation]]:
        """Score candidates for the current project.

        A new `top_n` (or project) is a full reload and resets per-candidate
        expansion; re-evaluating with the same parameters is a refresh that
        keeps it.
        """

        if not self.project_id:
            self._notifier.notify("Error", NO_PROJECT_MESSAGE, Severity.ERROR)
            return self.evaluation.state

        if top_n is not None:
            self.top_n = top_n
        params = {"project_id": self.project_id, "top_n": self.top_n}

        if self.evaluation.params == params:
            state = await self.evaluation.invalidate()
        else:
            state = await self.evaluation.update(params)

        if state.is_data and not self._candidates:
            self._notifier.notify("Info", NO_CANDIDATES_MESSAGE, Severity.INFO)
        return state

    def toggle_details(self, employee_id: str | None) -> None:
        if not employee_id:
            return
        self._candidates = toggle_expanded(self._candidates, employee_id, candidate_key)

    async def assign(self, employee_id: str | None) -> MutationOutcome:
        dependents = [self.evaluation] if self.evaluation.params is not None else []
        return await self.mutations.perform(
            self._service.create_assignment,
            {"project_id": self.project_id, "employee_id": employee_id},
            dependents,
            required=("project_id", "employee_id"),
            success=Notice("Success", "Assignment created."),
            precondition_message=NO_PROJECT_MESSAGE if not self.project_id else NO_EMPLOYEE_MESSAGE,
        )

    def close(self) -> None:
        self._unsubscribe()
        self.evaluation.close()
