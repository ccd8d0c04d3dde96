"""Base types for the tool-calling framework."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from onep.storage.store import StoryStore
    from onep.ui.base import UserInterface


class ToolName(StrEnum):
    """The closed set of tools the assistant may call."""

    CREATE_STORY = "create_story"
    UPDATE_STORY = "update_story"
    LIST_STORIES = "list_stories"
    CREATE_FEATURE = "create_feature"
    LIST_FEATURES = "list_features"
    SEARCH_STORIES = "search_stories"
    ASK_USER_QUESTION = "ask_user_question"
    PRESENT_DRAFT = "present_draft"
    ANALYZE_STORY_QUALITY = "analyze_story_quality"


@dataclass
class ToolResult:
    """Result of a tool execution.

    Every tool returns one of these. The orchestrator serializes it into a
    tool_result content item for Claude. Tools that collect an answer from
    the user set ``requires_user_input`` and put the answer in
    ``user_input`` so the model sees it as structured data.
    """

    data: dict[str, Any] | None = None
    error: str | None = None
    requires_user_input: bool = False
    user_input: Any = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            envelope["data"] = self.data
        if self.error is not None:
            envelope["error"] = self.error
        if self.requires_user_input:
            envelope["requiresUserInput"] = True
            envelope["userInput"] = self.user_input
        return envelope

    def to_content(self) -> str:
        """Serialize for the Claude tool_result content field."""
        return json.dumps(self.to_dict())


class ToolParams(BaseModel):
    """Base class for tool parameter models.

    Subclass with Field() definitions. Field names are snake_case; the JSON
    schema sent to Claude (and the input it sends back) uses camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass
class ToolContext:
    """Collaborators a tool handler may use. Injected by the registry."""

    store: StoryStore
    ui: UserInterface
