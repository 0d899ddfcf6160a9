"""Domain models (Pydantic v2).

Backend payloads are validated once, at the edge, through camelCase aliases;
unknown fields are ignored. Display items are frozen: a projection always
builds new objects, so reference equality is a valid change check.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class _Payload(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class _Display(BaseModel):
    model_config = ConfigDict(frozen=True)


class PlanStatus(str, Enum):
    """Lifecycle of a learning action inside an employee's plan."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    APPROVED = "Approved"

    @classmethod
    def options(cls) -> list[tuple[str, str]]:
        """Picklist entries as `(label, value)` pairs."""

        return [(status.value, status.value) for status in cls]

    @classmethod
    def parse(cls, value: str | None) -> "PlanStatus | None":
        for status in cls:
            if value == status.value:
                return status
        return None


# ---------------------------------------------------------------------------
# Raw payloads: learning service
# ---------------------------------------------------------------------------


class TopSkill(_Payload):
    skill_id: str | None = None
    skill_name: str = Field(..., min_length=1)
    required_level: float | None = None
    current_level: float | None = None
    gap: float | None = None


class LearningAction(_Payload):
    id: str = Field(..., min_length=1, description="Stable learning action id.")
    name: str = ""
    skill_name: str | None = None
    action_type: str | None = Field(default=None, alias="type")
    url: str | None = None
    duration_hours: float | None = None
    description: str | None = None


class PlanItem(_Payload):
    id: str = Field(..., min_length=1, description="Plan entry id (not the action id).")
    action_id: str | None = None
    action_name: str = ""
    skill_name: str | None = None
    status: str = PlanStatus.NOT_STARTED.value


class RecommendationsPayload(_Payload):
    top_skills: list[TopSkill] = Field(default_factory=list)
    recommended_actions: list[LearningAction] = Field(default_factory=list)
    my_plan: list[PlanItem] = Field(default_factory=list)

    @field_validator("top_skills", "recommended_actions", "my_plan", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Raw payloads: readiness service
# ---------------------------------------------------------------------------


class DeficitDetail(_Payload):
    """One detailed deficit row. Any `percentOfTotal` sent by the backend is dropped."""

    skill_name: str = Field(..., min_length=1)
    required_level: float | None = None
    has_level: float | None = None
    deficit: float | None = None
    importance: str | None = None
    weight: float | None = None
    penalty: float | None = None
    reason: str | None = None


class CandidateEvaluation(_Payload):
    employee_id: str = Field(..., min_length=1)
    employee_name: str = ""
    gap_score: float = Field(..., ge=0)
    deficits_by_skill: dict[str, float] = Field(default_factory=dict)
    deficits_detailed: list[DeficitDetail] | None = None
    details: str = ""

    @field_validator("deficits_by_skill", mode="before")
    @classmethod
    def _none_as_empty_mapping(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("details", "employee_name", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


# ---------------------------------------------------------------------------
# Display items
# ---------------------------------------------------------------------------


class ActionItem(_Display):
    """Recommended learning action, denormalized with plan membership."""

    action_id: str
    name: str
    skill_name: str | None = None
    action_type: str | None = None
    url: str | None = None
    duration_hours: float | None = None
    description: str | None = None
    in_plan: bool = False
    expanded: bool = False


class DeficitRow(_Display):
    skill_name: str
    deficit: float


class GapRow(_Display):
    skill_name: str
    required_level: float | None = None
    has_level: float | None = None
    deficit: float | None = None
    importance: str | None = None
    weight: float | None = None
    penalty: float | None = None
    reason: str | None = None
    penalty_share: float | None = Field(
        default=None,
        description="Share of the candidate's total penalty, in percent (derived client-side).",
    )


class CandidateItem(_Display):
    employee_id: str
    employee_name: str
    gap_score: float
    is_ready: bool
    deficits: tuple[DeficitRow, ...] = ()
    has_deficits: bool = False
    details: str = ""
    gap_rows: tuple[GapRow, ...] | None = None
    expanded: bool = False

    @property
    def details_icon(self) -> str:
        return "utility:chevrondown" if self.expanded else "utility:chevronright"

    @property
    def breakdown(self) -> tuple[DeficitRow, ...] | tuple[GapRow, ...]:
        """Detailed rows when the backend sent them, else the flat mapping rows."""

        return self.gap_rows if self.gap_rows else self.deficits


class RecommendationsView(_Display):
    top_skills: tuple[TopSkill, ...] = ()
    recommended_actions: tuple[ActionItem, ...] = ()
    my_plan: tuple[PlanItem, ...] = ()
