"""
YAML → typed runtime settings loader.

Loads runtime settings from planner.yaml (bundled with the package) and
optionally merges user overrides from ~/.calisthenics-planner/planner.yaml.

Usage:
    from calisthenics_planner.core.engine.config_loader import load_review_settings
    settings = load_review_settings()
    settings.model

If the bundled YAML cannot be parsed, all lookups fall back to the Python
defaults below (no crash).  If the user override file has parse errors, a
warning is issued and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    COACH_REVIEW_MAX_TOKENS,
    GOAL_REVIEW_MAX_TOKENS,
    REVIEW_BATCH_DELAY_SECONDS,
    REVIEW_WEEKS_PER_BATCH,
)

API_KEY_ENV = "OPENROUTER_API_KEY"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on any read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"calisthenics-planner: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled planner.yaml, or None if not found."""
    candidate = Path(__file__).parent.parent.parent / "planner.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.calisthenics-planner/planner.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".calisthenics-planner" / "planner.yaml"
    return p if p.exists() else None


def load_planner_config() -> dict[str, Any]:
    """
    Load and merge runtime configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/calisthenics_planner/planner.yaml
    2. User override at ~/.calisthenics-planner/planner.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


@dataclass(frozen=True)
class ReviewSettings:
    """Connection and pacing settings for the hosted completion endpoint."""

    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-4o-mini"
    api_key: str | None = None
    temperature: float = 0.3
    coach_max_tokens: int = COACH_REVIEW_MAX_TOKENS
    goal_max_tokens: int = GOAL_REVIEW_MAX_TOKENS
    authoring_max_tokens: int = 6000
    timeout_seconds: float = 45.0
    authoring_timeout_seconds: float = 120.0
    rate_limit_retries: int = 3
    rate_limit_base_delay_seconds: float = 2.0
    rate_limit_max_delay_seconds: float = 30.0
    empty_content_retries: int = 2
    empty_content_delay_seconds: float = 2.0
    weeks_per_batch: int = REVIEW_WEEKS_PER_BATCH
    batch_delay_seconds: float = REVIEW_BATCH_DELAY_SECONDS

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def load_review_settings(config: dict[str, Any] | None = None) -> ReviewSettings:
    """
    Build ReviewSettings from the ``review`` section plus the API key env var.

    Unknown keys are ignored; values are coerced to the default's type.

    Args:
        config: Already-loaded config dict (defaults to load_planner_config())

    Returns:
        Frozen ReviewSettings
    """
    if config is None:
        config = load_planner_config()
    section = config.get("review") or {}
    defaults = ReviewSettings()
    values: dict[str, Any] = {}
    for f in fields(ReviewSettings):
        if f.name == "api_key" or f.name not in section:
            continue
        default = getattr(defaults, f.name)
        try:
            values[f.name] = type(default)(section[f.name])
        except (TypeError, ValueError):
            warnings.warn(
                f"calisthenics-planner: invalid review.{f.name} value {section[f.name]!r}; using {default!r}",
                stacklevel=2,
            )
    values["api_key"] = os.environ.get(API_KEY_ENV) or None
    return ReviewSettings(**values)
