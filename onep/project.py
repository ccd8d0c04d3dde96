"""Project discovery and the ``one-p.yaml`` project file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from onep.storage.markdown import dump_frontmatter, load_frontmatter
from onep.storage.models import Priority, now_iso

logger = logging.getLogger(__name__)

CONFIG_FILE = "one-p.yaml"
PROJECT_DIRS = ("features", "personas")


class Persona(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str
    goals: list[str] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)
    context: str | None = None


class ProjectConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    description: str | None = None
    personas: list[Persona] = Field(default_factory=list)
    default_priority: Priority = "medium"
    created_at: str = Field(default_factory=now_iso)

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp_to_str(cls, value: object) -> object:
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return value


@dataclass
class AppConfig:
    """Where the current project lives, if anywhere."""

    project_path: Path | None = None
    project_config: ProjectConfig | None = None


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) to the first directory holding ``one-p.yaml``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / CONFIG_FILE).exists():
            return directory
    return None


def load_project_config(project_path: Path) -> ProjectConfig | None:
    """Read the project file, or None if it is missing or invalid."""
    path = project_path / CONFIG_FILE
    if not path.exists():
        return None
    try:
        meta, _ = load_frontmatter(path.read_text("utf-8"))
        return ProjectConfig.model_validate(meta)
    except (OSError, ValueError, ValidationError):
        logger.warning("Ignoring invalid project file %s", path, exc_info=True)
        return None


def save_project_config(project_path: Path, config: ProjectConfig) -> None:
    meta = config.model_dump(by_alias=True, exclude_none=True)
    (project_path / CONFIG_FILE).write_text(dump_frontmatter("", meta), encoding="utf-8")


def initialize_project(project_path: Path, name: str) -> ProjectConfig:
    """Create the project directories and a fresh ``one-p.yaml``."""
    for sub in PROJECT_DIRS:
        (project_path / sub).mkdir(parents=True, exist_ok=True)

    config = ProjectConfig(name=name, description=f"Project: {name}")
    save_project_config(project_path, config)
    logger.info("Initialized project %s at %s", name, project_path)
    return config


def load_app_config(start: Path | None = None) -> AppConfig:
    root = find_project_root(start)
    if root is None:
        return AppConfig()
    return AppConfig(project_path=root, project_config=load_project_config(root))
