"""ToolExecutor — runs the model's tool calls against one project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from onep.tools.base import ToolContext
from onep.tools.registry import ToolRegistry, registry

if TYPE_CHECKING:
    from onep.storage.store import StoryStore
    from onep.tools.base import ToolResult
    from onep.ui.base import UserInterface

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Binds the tool registry to a story store and a user interface.

    Every registered ``ToolName`` must have a handler; a registry with gaps
    is rejected up front rather than failing mid-conversation.
    """

    def __init__(
        self,
        store: StoryStore,
        ui: UserInterface,
        tool_registry: ToolRegistry = registry,
    ) -> None:
        missing = tool_registry.missing()
        if missing:
            msg = f"Tools without a handler: {', '.join(sorted(missing))}"
            raise RuntimeError(msg)
        self._registry = tool_registry
        self._ctx = ToolContext(store=store, ui=ui)

    @property
    def schemas(self) -> list[dict[str, Any]]:
        """Tool schemas to send with every model request."""
        return self._registry.get_schemas()

    async def execute(self, tool_name: str, tool_input: dict[str, Any]) -> ToolResult:
        """Run one tool. Never raises, except for a cancelled user prompt."""
        return await self._registry.execute(tool_name, tool_input, ctx=self._ctx)
