"""Employee learning screen: recommendations, plan and plan mutations.

The view owns one recommendations cache, one mutation coordinator and two
independent list controllers (top skills, recommended actions). Everything a
renderer needs is exposed as read-only properties; the projected lists are
replaced wholesale on every cache update.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from core.config import AppSettings
from core.domain.models import ActionItem, PlanItem, PlanStatus, RecommendationsPayload, RecommendationsView, TopSkill
from core.domain.state import MutationOutcome, SubscriptionState, Trigger
from core.interfaces.backend import LearningService
from core.interfaces.notifier import Notifier
from core.services.collapsible import CollapsibleListController
from core.services.mutation import MutationCoordinator, Notice
from core.services.projection import action_key, index_by_key, project_recommendations, toggle_expanded
from core.services.subscription import Params, SubscriptionCache

logger = logging.getLogger(__name__)

NBSP = "\u00a0"


class EmployeeLearningView:
    def __init__(
        self,
        service: LearningService,
        notifier: Notifier,
        settings: AppSettings | None = None,
        *,
        on_loading: Callable[[bool], None] | None = None,
    ) -> None:
        self._service = service
        self._settings = settings or AppSettings()

        self.employee_id: str | None = None
        self.error: str | None = None
        self._view = RecommendationsView()

        self.top_skills_list = CollapsibleListController(self._settings.top_skills_collapsed_count)
        self.actions_list = CollapsibleListController(self._settings.actions_collapsed_count)

        self.mutations = MutationCoordinator(notifier, on_loading=on_loading)
        self.recommendations: SubscriptionCache[RecommendationsPayload] = SubscriptionCache(
            self._fetch,
            name="recommendations",
        )
        self._unsubscribe = self.recommendations.add_listener(self._on_state)

    async def _fetch(self, params: Params) -> RecommendationsPayload:
        return await self._service.fetch_recommendations(
            subject_id=params["subject_id"],
            top_skill_count=params["top_skill_count"],
            actions_per_skill=params["actions_per_skill"],
        )

    def _on_state(self, state: SubscriptionState[RecommendationsPayload]) -> None:
        if state.is_error and state.error is not None:
            self.error = state.error.message
            logger.debug("recommendations for %s unavailable: %s", self.employee_id, self.error)
            return
        if not state.is_data:
            return

        self.error = None
        full_reload = state.trigger is Trigger.PARAMS
        previous = None if full_reload else index_by_key(self._view.recommended_actions, action_key)
        self._view = project_recommendations(state.data, previous)
        if full_reload:
            self.top_skills_list.reset()
            self.actions_list.reset()

    # ---------- Data load ----------

    async def load(
        self,
        employee_id: str,
        *,
        top_skill_count: int | None = None,
        actions_per_skill: int | None = None,
    ) -> SubscriptionState[RecommendationsPayload]:
        self.employee_id = employee_id
        return await self.recommendations.update(
            {
                "subject_id": employee_id,
                "top_skill_count": top_skill_count or self._settings.top_skill_count,
                "actions_per_skill": actions_per_skill or self._settings.actions_per_skill,
            }
        )

    def close(self) -> None:
        self._unsubscribe()
        self.recommendations.close()

    # ---------- Projected data ----------

    @property
    def view(self) -> RecommendationsView:
        return self._view

    @property
    def top_skills(self) -> tuple[TopSkill, ...]:
        return self._view.top_skills

    @property
    def recommended_actions(self) -> tuple[ActionItem, ...]:
        return self._view.recommended_actions

    @property
    def my_plan(self) -> tuple[PlanItem, ...]:
        return self._view.my_plan

    @property
    def loading(self) -> bool:
        return self.mutations.loading

    @property
    def status_options(self) -> list[tuple[str, str]]:
        return PlanStatus.options()

    # ---------- Tab labels ----------

    @property
    def tab_label_recommendations(self) -> str:
        return f"Recommendations ({len(self.recommended_actions)}){NBSP * 3}"

    @property
    def tab_label_plan(self) -> str:
        return f"{NBSP * 2}My Plan ({len(self.my_plan)})"

    # ---------- Visible lists ----------

    @property
    def visible_top_skills(self) -> list[TopSkill]:
        return self.top_skills_list.visible(self.top_skills)

    @property
    def visible_recommended_actions(self) -> list[ActionItem]:
        return self.actions_list.visible(self.recommended_actions)

    @property
    def show_top_skills_toggle(self) -> bool:
        return self.top_skills_list.should_show_toggle(self.top_skills)

    @property
    def show_actions_toggle(self) -> bool:
        return self.actions_list.should_show_toggle(self.recommended_actions)

    def toggle_top_skills(self) -> None:
        self.top_skills_list.toggle()

    def toggle_actions(self) -> None:
        self.actions_list.toggle()

    def toggle_action(self, action_id: str | None) -> None:
        if not action_id:
            return
        actions = toggle_expanded(self._view.recommended_actions, action_id, action_key)
        self._view = self._view.model_copy(update={"recommended_actions": tuple(actions)})

    # ---------- Actions ----------

    async def add_to_plan(self, action_id: str | None) -> MutationOutcome:
        return await self.mutations.perform(
            self._service.add_to_plan,
            {"subject_id": self.employee_id, "action_id": action_id},
            [self.recommendations],
            required=("subject_id", "action_id"),
            success=Notice("Added", "Learning action added to your plan."),
            precondition_message="Learning action or employee missing from action.",
        )

    async def update_status(self, plan_item_id: str | None, new_status: str | None) -> MutationOutcome:
        status = PlanStatus.parse(new_status)
        if status is None and new_status:
            return self.mutations.fail_precondition(
                f'Unknown plan status "{new_status}".',
                missing=("new_status",),
            )

        return await self.mutations.perform(
            self._service.update_plan_status,
            {"plan_item_id": plan_item_id, "new_status": status.value if status else None},
            [self.recommendations],
            required=("plan_item_id", "new_status"),
            success=Notice("Updated", f'Status set to "{new_status}".'),
            precondition_message="Plan item or status missing from action.",
        )
