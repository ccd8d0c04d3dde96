"""Tool framework — import tool modules here to register them."""

# Import tool modules so their @registry.tool() decorators execute.
from onep.tools import feature_tools, interaction_tools, story_tools  # noqa: F401
from onep.tools.base import ToolContext, ToolName, ToolResult
from onep.tools.executor import ToolExecutor
from onep.tools.registry import registry

__all__ = ["ToolContext", "ToolExecutor", "ToolName", "ToolResult", "registry"]
