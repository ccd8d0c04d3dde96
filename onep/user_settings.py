"""Persisted user settings (API key and model) in ``~/.one-p/settings.yaml``."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from onep.config import DEFAULT_MODEL, settings

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class UserSettings(BaseModel):
    """API credential and preferred model, as stored on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    api_key: str = Field(min_length=1)
    model: str = DEFAULT_MODEL
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)


def _path(path: Path | None) -> Path:
    return path or settings.settings_path


def settings_exist(path: Path | None = None) -> bool:
    return _path(path).exists()


def load_settings(path: Path | None = None) -> UserSettings | None:
    """Load saved settings, or None if missing or unreadable."""
    target = _path(path)
    if not target.exists():
        return None
    try:
        data = yaml.safe_load(target.read_text("utf-8")) or {}
        return UserSettings.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError):
        logger.warning("Ignoring unreadable settings file %s", target, exc_info=True)
        return None


def save_settings(user_settings: UserSettings, path: Path | None = None) -> UserSettings:
    """Write settings with a fresh ``updatedAt`` and owner-only permissions."""
    target = _path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    saved = user_settings.model_copy(update={"updated_at": _now()})
    target.write_text(
        yaml.safe_dump(saved.model_dump(by_alias=True), sort_keys=False),
        encoding="utf-8",
    )
    try:
        target.chmod(0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", target)
    return saved


def update_settings(path: Path | None = None, **updates: Any) -> UserSettings | None:
    """Merge *updates* into the saved settings. Returns None when nothing is saved."""
    current = load_settings(path)
    if current is None:
        return None
    return save_settings(current.model_copy(update=updates), path)


def delete_settings(path: Path | None = None) -> bool:
    """Remove the settings file. Returns True if it existed."""
    target = _path(path)
    if not target.exists():
        return False
    target.unlink()
    return True


def is_valid_api_key_format(key: str) -> bool:
    """Anthropic keys start with ``sk-ant-``."""
    return key.startswith("sk-ant-") and len(key) > 20


def mask_api_key(key: str) -> str:
    if len(key) <= 12:
        return "***"
    return f"{key[:8]}...{key[-4:]}"


def get_api_key(path: Path | None = None) -> str | None:
    """Resolve the API key: environment first, then the settings file."""
    if settings.anthropic_api_key:
        return settings.anthropic_api_key
    saved = load_settings(path)
    return saved.api_key if saved else None


def get_model(path: Path | None = None) -> str:
    """Resolve the model id: environment override, settings file, then default."""
    if settings.claude_model:
        return settings.claude_model
    saved = load_settings(path)
    return saved.model if saved else DEFAULT_MODEL
