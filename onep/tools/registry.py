"""Tool registry — central catalog for all tools."""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from onep.tools.base import ToolContext, ToolName, ToolParams, ToolResult
from onep.ui.base import PromptCancelledError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass
class ToolDef:
    """Internal representation of a registered tool."""

    name: ToolName
    description: str
    handler: Callable[..., Awaitable[ToolResult]]
    params_model: type[ToolParams] | None = None


class ToolRegistry:
    """Central registry for all tools.

    Tools register with a decorator::

        @registry.tool(
            name=ToolName.LIST_FEATURES,
            description="List all features",
        )
        async def list_features(ctx: ToolContext) -> ToolResult:
            return ToolResult(data={"count": 0})

    Names come from the closed ``ToolName`` enum; ``missing()`` reports any
    member without a handler.
    """

    def __init__(self) -> None:
        self._tools: dict[ToolName, ToolDef] = {}

    def tool(
        self,
        *,
        name: ToolName,
        description: str,
        params_model: type[ToolParams] | None = None,
    ) -> Callable:
        """Decorator to register an async function as a tool."""

        def decorator(fn: Callable[..., Awaitable[ToolResult]]) -> Callable:
            if not inspect.iscoroutinefunction(fn):
                msg = f"Tool handler '{name}' must be an async function"
                raise TypeError(msg)

            self._tools[name] = ToolDef(
                name=name,
                description=description,
                handler=fn,
                params_model=params_model,
            )
            return fn

        return decorator

    def get(self, name: str) -> ToolDef | None:
        """Look up a tool by name."""
        try:
            return self._tools.get(ToolName(name))
        except ValueError:
            return None

    @property
    def tool_names(self) -> list[str]:
        """All registered tool names."""
        return [str(n) for n in self._tools]

    def missing(self) -> set[ToolName]:
        """Tool names that have no registered handler."""
        return set(ToolName) - set(self._tools)

    def get_schemas(self) -> list[dict[str, Any]]:
        """Generate Claude-compatible tool schemas in ``ToolName`` order."""
        return [self._tool_schema(self._tools[n]) for n in ToolName if n in self._tools]

    async def execute(
        self,
        name: str,
        arguments: dict[str, Any],
        ctx: ToolContext | None = None,
    ) -> ToolResult:
        """Execute a tool by name with the given arguments.

        Validates arguments against the params_model if one is defined. If
        the handler accepts a ``ctx`` parameter, the context is injected.
        Unknown names, invalid input and handler failures all come back as
        error results; only ``PromptCancelledError`` propagates.
        """
        tool_def = self.get(name)
        if tool_def is None:
            return ToolResult(error=f"Unknown tool: {name}")

        logger.info("Tool '%s' called with %s", name, arguments)
        t0 = time.monotonic()

        try:
            if tool_def.params_model is not None:
                params = tool_def.params_model.model_validate(arguments)
                kwargs = params.model_dump()
            else:
                kwargs = {}

            if ctx is not None and _accepts_param(tool_def.handler, "ctx"):
                kwargs["ctx"] = ctx

            result = await tool_def.handler(**kwargs)
        except PromptCancelledError:
            logger.info("Tool '%s' cancelled by user", name)
            raise
        except ValidationError as exc:
            logger.warning("Tool '%s' got invalid input: %s", name, exc)
            return ToolResult(error=f"Invalid input for tool '{name}': {exc}")
        except Exception as exc:
            elapsed = time.monotonic() - t0
            logger.exception("Tool '%s' failed in %.2fs", name, elapsed)
            return ToolResult(error=f"Tool '{name}' failed: {exc}")

        elapsed = time.monotonic() - t0
        if result.success:
            logger.info("Tool '%s' succeeded in %.2fs", name, elapsed)
        else:
            logger.warning("Tool '%s' returned error in %.2fs: %s", name, elapsed, result.error)
        return result

    @staticmethod
    def _tool_schema(tool_def: ToolDef) -> dict[str, Any]:
        """Build a single Claude tool schema dict."""
        if tool_def.params_model is not None:
            input_schema = tool_def.params_model.model_json_schema(by_alias=True)
        else:
            input_schema = {"type": "object", "properties": {}}

        return {
            "name": str(tool_def.name),
            "description": tool_def.description,
            "input_schema": input_schema,
        }


def _accepts_param(fn: Callable[..., Any], param_name: str) -> bool:
    """Check whether a callable accepts a given parameter name."""
    return param_name in inspect.signature(fn).parameters


# Global registry — tool modules register into it on import.
registry = ToolRegistry()
