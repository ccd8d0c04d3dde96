"""Tests for AnthropicGateway — request shape and response conversion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import anthropic
import pytest

from onep.llm.gateway import AnthropicGateway, GatewayError, MissingCredentialError
from onep.llm.messages import Message, StopReason, TextItem, ToolUseItem
from onep.user_settings import UserSettings, save_settings

# -- Helpers -------------------------------------------------------------------


@dataclass
class _FakeBlock:
    type: str
    text: str = ""
    id: str = ""
    name: str = ""
    input: Any = None


def _client(content: list[_FakeBlock], stop_reason: str = "end_turn") -> MagicMock:
    client = MagicMock()
    response = MagicMock()
    response.content = content
    response.stop_reason = stop_reason
    client.messages.create = AsyncMock(return_value=response)
    return client


def _status_error(message: str) -> anthropic.APIStatusError:
    return anthropic.APIStatusError(
        message=message,
        response=MagicMock(status_code=500, headers={}),
        body={"type": "error", "error": {"type": "api_error", "message": message}},
    )


# -- Construction --------------------------------------------------------------


def test_missing_key_fails_fast() -> None:
    with pytest.raises(MissingCredentialError, match="one-p config"):
        AnthropicGateway("", "claude-sonnet-4-20250514")


def test_from_settings_without_any_key() -> None:
    with pytest.raises(MissingCredentialError, match="ANTHROPIC_API_KEY"):
        AnthropicGateway.from_settings()


def test_from_settings_uses_saved_key_and_model() -> None:
    save_settings(UserSettings(api_key="sk-ant-" + "x" * 30, model="claude-3-5-haiku-20241022"))

    gateway = AnthropicGateway.from_settings()

    assert gateway.model == "claude-3-5-haiku-20241022"


def test_from_settings_env_model_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("onep.config.settings.anthropic_api_key", "sk-ant-" + "e" * 30)
    monkeypatch.setattr("onep.config.settings.claude_model", "claude-opus-4-5-20251101")
    save_settings(UserSettings(api_key="sk-ant-" + "x" * 30, model="claude-3-5-haiku-20241022"))

    gateway = AnthropicGateway.from_settings()

    assert gateway.model == "claude-opus-4-5-20251101"


# -- send ----------------------------------------------------------------------


async def test_send_request_shape() -> None:
    client = _client([_FakeBlock(type="text", text="Hi")])
    gateway = AnthropicGateway("key", "model-x", max_tokens=123, client=client)
    tools = [{"name": "list_features", "description": "d", "input_schema": {}}]

    await gateway.send("system", [Message.user("Hello")], tools)

    client.messages.create.assert_awaited_once_with(
        model="model-x",
        max_tokens=123,
        system="system",
        messages=[{"role": "user", "content": "Hello"}],
        tools=tools,
    )


async def test_send_omits_empty_tools() -> None:
    client = _client([_FakeBlock(type="text", text="Hi")])
    gateway = AnthropicGateway("key", "model-x", client=client)

    await gateway.send("system", [Message.user("Hello")], [])

    assert "tools" not in client.messages.create.call_args.kwargs


async def test_send_converts_content() -> None:
    client = _client(
        [
            _FakeBlock(type="text", text="Let me check"),
            _FakeBlock(type="thinking"),
            _FakeBlock(type="tool_use", id="t1", name="list_stories", input={"status": "done"}),
        ],
        stop_reason="tool_use",
    )
    gateway = AnthropicGateway("key", "model-x", client=client)

    response = await gateway.send("system", [Message.user("Hello")], [])

    assert response.content == (
        TextItem("Let me check"),
        ToolUseItem(id="t1", name="list_stories", input={"status": "done"}),
    )
    assert response.stop_reason is StopReason.TOOL_USE


async def test_send_unknown_stop_reason() -> None:
    client = _client([_FakeBlock(type="text", text="Hi")], stop_reason="something_new")
    gateway = AnthropicGateway("key", "model-x", client=client)

    response = await gateway.send("system", [Message.user("Hello")], [])

    assert response.stop_reason is StopReason.UNKNOWN
    assert not response.stop_reason.is_terminal


async def test_send_wraps_api_errors() -> None:
    client = MagicMock()
    client.messages.create = AsyncMock(side_effect=_status_error("Overloaded"))
    gateway = AnthropicGateway("key", "model-x", client=client)

    with pytest.raises(GatewayError, match="Overloaded"):
        await gateway.send("system", [Message.user("Hello")], [])


async def test_send_rejects_non_object_tool_input() -> None:
    client = _client([_FakeBlock(type="tool_use", id="t1", name="x", input="oops")])
    gateway = AnthropicGateway("key", "model-x", client=client)

    with pytest.raises(GatewayError, match="non-object input"):
        await gateway.send("system", [Message.user("Hello")], [])
