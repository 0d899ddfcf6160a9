"""Settings (pydantic-settings) and the per-user `.env` they are read from."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "skillsync"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "skillsync"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "skillsync"
    return Path.home() / ".config" / "skillsync"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# SkillSync user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings, read from `SKILLSYNC_*` variables and `.env` files."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLSYNC_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:8080/api",
        min_length=8,
        description="Base URL of the learning/readiness backend.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="skillsync/0.1",
        min_length=1,
        description="User-Agent sent to the backend.",
    )

    top_skill_count: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many top skills to request for an employee.",
    )
    actions_per_skill: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many learning actions to request per skill.",
    )
    top_skills_collapsed_count: int = Field(
        default=3,
        ge=0,
        description="Top skills shown before 'Show more'.",
    )
    actions_collapsed_count: int = Field(
        default=5,
        ge=0,
        description="Recommended actions shown before 'Show more'.",
    )
    evaluation_top_n: int = Field(
        default=10,
        ge=1,
        le=500,
        description="How many candidates to score for a project.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the CLI (DEBUG, INFO, WARNING, ...).",
    )
