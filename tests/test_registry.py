"""Tests for the tool registry."""

import pytest
from pydantic import Field

import onep.tools  # noqa: F401  (registers the built-in tools)
from onep.tools.base import ToolContext, ToolName, ToolParams, ToolResult
from onep.tools.registry import ToolRegistry, registry
from onep.ui.base import PromptCancelledError

# -- Fixtures ----------------------------------------------------------------


@pytest.fixture
def reg() -> ToolRegistry:
    """Fresh registry for each test."""
    return ToolRegistry()


class SearchParams(ToolParams):
    query: str = Field(description="Search query")
    max_results: int = Field(default=10, description="Max results")


# -- Decorator registration --------------------------------------------------


def test_register_via_decorator(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.LIST_FEATURES, description="List features")
    async def list_features() -> ToolResult:
        return ToolResult(data={"count": 0})

    assert "list_features" in reg.tool_names
    assert reg.get("list_features") is not None
    assert reg.get("list_features").description == "List features"


def test_decorator_rejects_sync_function(reg: ToolRegistry) -> None:
    with pytest.raises(TypeError, match="must be an async function"):

        @reg.tool(name=ToolName.LIST_FEATURES, description="Bad")
        def bad() -> ToolResult:
            return ToolResult()


def test_get_unknown_name_returns_none(reg: ToolRegistry) -> None:
    assert reg.get("not_a_real_tool") is None
    assert reg.get("create_story") is None


def test_missing_reports_unregistered_tools(reg: ToolRegistry) -> None:
    assert reg.missing() == set(ToolName)

    @reg.tool(name=ToolName.SEARCH_STORIES, description="Search")
    async def search() -> ToolResult:
        return ToolResult()

    assert ToolName.SEARCH_STORIES not in reg.missing()
    assert len(reg.missing()) == len(ToolName) - 1


# -- Schema generation -------------------------------------------------------


def test_get_schemas_no_params(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.LIST_FEATURES, description="List features")
    async def list_features() -> ToolResult:
        return ToolResult()

    schemas = reg.get_schemas()
    assert len(schemas) == 1
    assert schemas[0]["name"] == "list_features"
    assert schemas[0]["description"] == "List features"
    assert schemas[0]["input_schema"] == {"type": "object", "properties": {}}


def test_get_schemas_uses_camel_case(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.SEARCH_STORIES, description="Search", params_model=SearchParams)
    async def search(query: str, max_results: int = 10) -> ToolResult:
        return ToolResult()

    schema = reg.get_schemas()[0]["input_schema"]
    assert set(schema["properties"]) == {"query", "maxResults"}
    assert schema["properties"]["maxResults"]["type"] == "integer"
    assert schema["required"] == ["query"]


def test_get_schemas_follow_enum_order(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.LIST_FEATURES, description="b")
    async def b() -> ToolResult:
        return ToolResult()

    @reg.tool(name=ToolName.CREATE_STORY, description="a")
    async def a() -> ToolResult:
        return ToolResult()

    assert [s["name"] for s in reg.get_schemas()] == ["create_story", "list_features"]


# -- Execution ---------------------------------------------------------------


async def test_execute_unknown_tool(reg: ToolRegistry) -> None:
    result = await reg.execute("not_a_real_tool", {})
    assert not result.success
    assert result.error == "Unknown tool: not_a_real_tool"


async def test_execute_with_params(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.SEARCH_STORIES, description="Search", params_model=SearchParams)
    async def search(query: str, max_results: int = 10) -> ToolResult:
        return ToolResult(data={"query": query, "max": max_results})

    result = await reg.execute("search_stories", {"query": "login", "maxResults": 3})
    assert result.success
    assert result.data == {"query": "login", "max": 3}


async def test_execute_invalid_input(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.SEARCH_STORIES, description="Search", params_model=SearchParams)
    async def search(query: str, max_results: int = 10) -> ToolResult:
        return ToolResult()

    result = await reg.execute("search_stories", {"maxResults": "lots"})
    assert not result.success
    assert result.error.startswith("Invalid input for tool 'search_stories'")


async def test_execute_injects_ctx(reg: ToolRegistry, ctx: ToolContext) -> None:
    seen = {}

    @reg.tool(name=ToolName.LIST_FEATURES, description="List")
    async def list_features(ctx: ToolContext) -> ToolResult:
        seen["ctx"] = ctx
        return ToolResult(data={})

    result = await reg.execute("list_features", {}, ctx=ctx)
    assert result.success
    assert seen["ctx"] is ctx


async def test_execute_handler_exception_becomes_error(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.LIST_FEATURES, description="List")
    async def list_features() -> ToolResult:
        raise RuntimeError("disk on fire")

    result = await reg.execute("list_features", {})
    assert not result.success
    assert result.error == "Tool 'list_features' failed: disk on fire"


async def test_execute_propagates_prompt_cancellation(reg: ToolRegistry) -> None:
    @reg.tool(name=ToolName.ASK_USER_QUESTION, description="Ask")
    async def ask() -> ToolResult:
        raise PromptCancelledError

    with pytest.raises(PromptCancelledError):
        await reg.execute("ask_user_question", {})


# -- Built-in tools ----------------------------------------------------------


def test_global_registry_covers_every_tool() -> None:
    assert registry.missing() == set()
    assert [s["name"] for s in registry.get_schemas()] == [str(n) for n in ToolName]


def test_create_story_schema_required_fields() -> None:
    schema = next(s for s in registry.get_schemas() if s["name"] == "create_story")
    required = set(schema["input_schema"]["required"])
    assert required == {"id", "title", "asA", "iWant", "soThat", "acceptanceCriteria"}
    assert schema["input_schema"]["properties"]["priority"]["anyOf"][0]["enum"] == [
        "low",
        "medium",
        "high",
        "critical",
    ]


def test_every_builtin_tool_field_is_described() -> None:
    for schema in registry.get_schemas():
        for field_name, prop in schema["input_schema"]["properties"].items():
            assert prop.get("description"), f"{schema['name']}.{field_name}"


def test_present_draft_schema() -> None:
    schema = next(s for s in registry.get_schemas() if s["name"] == "present_draft")

    props = schema["input_schema"]["properties"]
    assert props["asA"]["description"] == "The user role/persona"
    assert sorted(schema["input_schema"]["required"]) == [
        "acceptanceCriteria",
        "asA",
        "iWant",
        "soThat",
        "title",
    ]
