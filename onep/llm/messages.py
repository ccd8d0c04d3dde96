"""Conversation message types shared by the gateway and the orchestrator.

A message's content is either plain text or a tuple of content items. Items
are a closed union of three variants: ``TextItem``, ``ToolUseItem`` and
``ToolResultItem``. Everything here is immutable; the conversation history
only ever grows by appending new ``Message`` objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class StopReason(StrEnum):
    """Why the model stopped generating."""

    END_TURN = "end_turn"
    STOP_SEQUENCE = "stop_sequence"
    TOOL_USE = "tool_use"
    MAX_TOKENS = "max_tokens"
    PAUSE_TURN = "pause_turn"
    REFUSAL = "refusal"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> StopReason:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        """True for natural completion."""
        return self in (StopReason.END_TURN, StopReason.STOP_SEQUENCE)


@dataclass(frozen=True)
class TextItem:
    text: str
    type: Literal["text"] = field(default="text", init=False)

    def to_api(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ToolUseItem:
    """A tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, Any]
    type: Literal["tool_use"] = field(default="tool_use", init=False)

    def to_api(self) -> dict[str, Any]:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}


@dataclass(frozen=True)
class ToolResultItem:
    """The serialized outcome of one tool invocation, keyed by its id."""

    tool_use_id: str
    content: str
    is_error: bool = False
    type: Literal["tool_result"] = field(default="tool_result", init=False)

    def to_api(self) -> dict[str, Any]:
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
            "is_error": self.is_error,
        }


ContentItem = TextItem | ToolUseItem | ToolResultItem


@dataclass(frozen=True)
class Message:
    """A single conversation turn."""

    role: Role
    content: str | tuple[ContentItem, ...]

    @classmethod
    def user(cls, content: str | tuple[ContentItem, ...]) -> Message:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str | tuple[ContentItem, ...]) -> Message:
        return cls(role=Role.ASSISTANT, content=content)

    @property
    def items(self) -> tuple[ContentItem, ...]:
        """Content as items; plain text becomes a single ``TextItem``."""
        if isinstance(self.content, str):
            return (TextItem(self.content),)
        return self.content

    @property
    def tool_uses(self) -> list[ToolUseItem]:
        return [item for item in self.items if isinstance(item, ToolUseItem)]

    @property
    def tool_results(self) -> list[ToolResultItem]:
        return [item for item in self.items if isinstance(item, ToolResultItem)]

    def to_api(self) -> dict[str, Any]:
        """Format for the Claude Messages API."""
        if isinstance(self.content, str):
            return {"role": str(self.role), "content": self.content}
        return {"role": str(self.role), "content": [item.to_api() for item in self.content]}


@dataclass(frozen=True)
class ModelResponse:
    """What the gateway returns for one request."""

    content: tuple[ContentItem, ...]
    stop_reason: StopReason

    @property
    def texts(self) -> list[str]:
        return [item.text for item in self.content if isinstance(item, TextItem)]

    @property
    def tool_uses(self) -> list[ToolUseItem]:
        return [item for item in self.content if isinstance(item, ToolUseItem)]
