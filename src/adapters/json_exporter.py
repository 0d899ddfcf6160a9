"""JSON export of projected views.

Keys are sorted so that exports of the same data diff cleanly between runs.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from core.domain.models import CandidateItem, RecommendationsView


def _write(payload: object, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path


def export_candidates_json(
    *,
    project_id: str,
    candidates: Sequence[CandidateItem],
    output_path: Path,
) -> Path:
    """Export projected candidates; UI-only flags are left out."""

    payload = {
        "project_id": project_id,
        "candidates": [c.model_dump(mode="json", exclude={"expanded"}) for c in candidates],
    }
    return _write(payload, output_path)


def export_recommendations_json(
    *,
    employee_id: str,
    view: RecommendationsView,
    output_path: Path,
) -> Path:
    payload = {
        "employee_id": employee_id,
        **view.model_dump(mode="json", exclude={"recommended_actions": {"__all__": {"expanded"}}}),
    }
    return _write(payload, output_path)
