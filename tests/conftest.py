from __future__ import annotations

import pytest

from core.config import AppSettings

from fakes import RecordingNotifier


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url="http://backend.test/api",
        top_skill_count=10,
        actions_per_skill=5,
        top_skills_collapsed_count=3,
        actions_collapsed_count=5,
        evaluation_top_n=10,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
