"""UserInterface protocol — what the assistant needs from the terminal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from onep.storage.models import Feature, Story


class PromptCancelledError(Exception):
    """The user aborted an interactive prompt (Ctrl+C or end of input)."""


@dataclass(frozen=True)
class QuestionOption:
    label: str
    value: str
    description: str | None = None


@runtime_checkable
class UserInterface(Protocol):
    """Protocol that every front end must satisfy.

    Prompt methods raise ``PromptCancelledError`` when the user aborts.
    """

    def display_text(self, text: str) -> None:
        """Show assistant text."""
        ...

    def display_tool_usage(self, tool_name: str) -> None: ...

    def display_draft(self, title: str, fields: dict[str, Any]) -> None: ...

    def display_story_list(self, stories: list[Story]) -> None: ...

    def display_feature(self, feature: Feature, story_count: int | None = None) -> None: ...

    def thinking(self) -> AbstractContextManager[Any]:
        """Context manager shown while waiting on the model."""
        ...

    async def ask_single_choice(self, question: str, options: list[QuestionOption]) -> str: ...

    async def ask_multi_choice(
        self, question: str, options: list[QuestionOption]
    ) -> list[str]: ...

    async def ask_free_text(self, prompt: str) -> str: ...

    async def ask_yes_no(self, prompt: str, default: bool = True) -> bool: ...
