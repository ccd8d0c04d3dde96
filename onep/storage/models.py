"""Story and Feature records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

StoryStatus = Literal["draft", "ready", "in-progress", "done"]
Priority = Literal["low", "medium", "high", "critical"]
StoryType = Literal["user-story", "technical-story", "bug", "spike"]

STATUSES: tuple[str, ...] = ("draft", "ready", "in-progress", "done")
PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "critical")

BACKLOG = "backlog"


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


class Record(BaseModel):
    """Base for documents kept in the store.

    Field names are snake_case in Python and camelCase on disk.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamp_to_str(cls, value: Any) -> Any:
        # YAML turns unquoted timestamps into datetime objects
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class AcceptanceCriterion(BaseModel):
    text: str
    completed: bool = False


class Story(Record):
    id: str
    title: str
    type: StoryType = "user-story"
    status: StoryStatus = "draft"
    priority: Priority = "medium"
    feature: str | None = None
    persona: str | None = None
    as_a: str | None = None
    i_want: str | None = None
    so_that: str | None = None
    acceptance_criteria: list[AcceptanceCriterion] = Field(default_factory=list)
    open_questions: list[str] = Field(default_factory=list)
    edge_cases: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    related_stories: list[str] = Field(default_factory=list)
    estimate: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def feature_id(self) -> str:
        """Feature directory the story lives in."""
        return self.feature or BACKLOG

    def search_text(self) -> str:
        """All searchable text, lower-cased."""
        parts = [
            self.title,
            self.as_a,
            self.i_want,
            self.so_that,
            *(ac.text for ac in self.acceptance_criteria),
            *self.open_questions,
            *self.edge_cases,
            *self.tags,
        ]
        return " ".join(p for p in parts if p).lower()


class Feature(Record):
    id: str
    title: str
    description: str | None = None
    status: StoryStatus = "draft"
    priority: Priority = "medium"
    success_criteria: list[str] = Field(default_factory=list)
    stories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


def criteria_from_texts(texts: list[str]) -> list[AcceptanceCriterion]:
    """Turn plain criterion strings into uncompleted criteria."""
    return [AcceptanceCriterion(text=text) for text in texts]
