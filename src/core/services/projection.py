"""Projection of raw backend payloads into display items.

Rules shared by every projector here:
- Pure: output depends only on the raw payload and the previous items map.
- Order preserving relative to the raw input.
- Replace, don't mutate: previous items are read, never edited; the result is
  always a fresh list of fresh (frozen) items.
- UI-only flags (`expanded`) are carried forward by stable key; unknown keys
  start collapsed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from core.domain.models import (
    ActionItem,
    CandidateEvaluation,
    CandidateItem,
    DeficitDetail,
    DeficitRow,
    GapRow,
    LearningAction,
    RecommendationsPayload,
    RecommendationsView,
)

ItemT = TypeVar("ItemT", ActionItem, CandidateItem)


def index_by_key(items: Iterable[ItemT] | None, key: Callable[[ItemT], str]) -> dict[str, ItemT]:
    """Build the `previous_items_by_key` map for the next projection."""

    return {key(item): item for item in items or ()}


def candidate_key(item: CandidateItem) -> str:
    return item.employee_id


def action_key(item: ActionItem) -> str:
    return item.action_id


def _carried_expanded(key: str, previous: Mapping[str, Any] | None) -> bool:
    if not previous:
        return False
    prior = previous.get(key)
    return bool(prior.expanded) if prior is not None else False


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------


def _deficit_rows(deficits_by_skill: Mapping[str, float]) -> tuple[DeficitRow, ...]:
    return tuple(
        DeficitRow(skill_name=skill_name, deficit=deficit)
        for skill_name, deficit in deficits_by_skill.items()
    )


def _gap_rows(details: list[DeficitDetail] | None) -> tuple[GapRow, ...] | None:
    if not details:
        return None

    total_penalty = sum(d.penalty for d in details if d.penalty is not None)

    rows: list[GapRow] = []
    for detail in details:
        share = None
        if detail.penalty is not None and total_penalty > 0:
            share = round(detail.penalty / total_penalty * 100, 1)
        rows.append(
            GapRow(
                skill_name=detail.skill_name,
                required_level=detail.required_level,
                has_level=detail.has_level,
                deficit=detail.deficit,
                importance=detail.importance,
                weight=detail.weight,
                penalty=detail.penalty,
                reason=detail.reason,
                penalty_share=share,
            )
        )
    return tuple(rows)


def project_candidate(
    raw: CandidateEvaluation | Mapping[str, Any],
    previous: Mapping[str, CandidateItem] | None = None,
) -> CandidateItem:
    record = CandidateEvaluation.model_validate(raw)
    deficits = _deficit_rows(record.deficits_by_skill)

    return CandidateItem(
        employee_id=record.employee_id,
        employee_name=record.employee_name,
        gap_score=record.gap_score,
        # Exact equality: a residual gap of 0.0001 is not ready.
        is_ready=record.gap_score == 0,
        deficits=deficits,
        has_deficits=len(deficits) > 0,
        details=record.details,
        gap_rows=_gap_rows(record.deficits_detailed),
        expanded=_carried_expanded(record.employee_id, previous),
    )


def project_candidates(
    raw: Iterable[CandidateEvaluation | Mapping[str, Any]] | None,
    previous: Mapping[str, CandidateItem] | None = None,
) -> list[CandidateItem]:
    return [project_candidate(record, previous) for record in raw or ()]


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def project_action(
    action: LearningAction,
    *,
    planned_ids: frozenset[str],
    previous: Mapping[str, ActionItem] | None = None,
) -> ActionItem:
    return ActionItem(
        action_id=action.id,
        name=action.name,
        skill_name=action.skill_name,
        action_type=action.action_type,
        url=action.url,
        duration_hours=action.duration_hours,
        description=action.description,
        in_plan=action.id in planned_ids,
        expanded=_carried_expanded(action.id, previous),
    )


def project_recommendations(
    raw: RecommendationsPayload | Mapping[str, Any] | None,
    previous_actions: Mapping[str, ActionItem] | None = None,
) -> RecommendationsView:
    payload = RecommendationsPayload.model_validate(raw or {})
    planned_ids = frozenset(item.action_id for item in payload.my_plan if item.action_id)

    return RecommendationsView(
        top_skills=tuple(payload.top_skills),
        recommended_actions=tuple(
            project_action(action, planned_ids=planned_ids, previous=previous_actions)
            for action in payload.recommended_actions
        ),
        my_plan=tuple(payload.my_plan),
    )


# ---------------------------------------------------------------------------
# UI-state transitions
# ---------------------------------------------------------------------------


def toggle_expanded(items: Iterable[ItemT], target: str, key: Callable[[ItemT], str]) -> list[ItemT]:
    """Return a new list where only the item keyed `target` has `expanded` flipped.

    Items that do not match are reused as-is.
    """

    return [
        item.model_copy(update={"expanded": not item.expanded}) if key(item) == target else item
        for item in items
    ]
