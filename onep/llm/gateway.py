"""Async Claude API gateway: one request in, one structured response out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import anthropic

from onep.config import settings
from onep.llm.messages import ContentItem, ModelResponse, StopReason, TextItem, ToolUseItem
from onep.user_settings import get_api_key, get_model

if TYPE_CHECKING:
    from collections.abc import Sequence

    from onep.llm.messages import Message

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """The model could not be reached or returned something unusable."""


class MissingCredentialError(GatewayError):
    """No API key in the environment or the settings file."""

    def __init__(self) -> None:
        super().__init__(
            "No API key configured.\n"
            'Run "one-p config" to set up your API key, '
            "or set the ANTHROPIC_API_KEY environment variable."
        )


class ModelGateway(Protocol):
    """Anything that can answer a chat request."""

    async def send(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        tools: list[dict[str, Any]],
    ) -> ModelResponse: ...


def _convert_content(content: list[Any]) -> tuple[ContentItem, ...]:
    """Convert SDK content blocks to message items, dropping unknown block types."""
    items: list[ContentItem] = []
    for block in content:
        if block.type == "text":
            items.append(TextItem(block.text))
        elif block.type == "tool_use":
            if not isinstance(block.input, dict):
                msg = f"Tool call {block.name!r} has non-object input"
                raise GatewayError(msg)
            items.append(ToolUseItem(id=block.id, name=block.name, input=block.input))
        else:
            logger.debug("Skipping unsupported content block type %r", block.type)
    return tuple(items)


class AnthropicGateway:
    """Claude Messages API behind the ``ModelGateway`` protocol.

    Each instance owns its own client, so sessions and tests never share
    hidden state. Use ``from_settings()`` to resolve the credential and model
    the usual way (environment first, then ``~/.one-p/settings.yaml``).
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        max_tokens: int | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        if not api_key and client is None:
            raise MissingCredentialError
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens or settings.max_tokens

    @classmethod
    def from_settings(cls) -> AnthropicGateway:
        """Build a gateway from the resolved credential and model.

        Raises ``MissingCredentialError`` when no API key is available.
        """
        api_key = get_api_key()
        if not api_key:
            raise MissingCredentialError
        model = get_model()
        logger.info("Using model %s", model)
        return cls(api_key, model)

    async def send(
        self,
        system_prompt: str,
        messages: Sequence[Message],
        tools: list[dict[str, Any]],
    ) -> ModelResponse:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [m.to_api() for m in messages],
        }
        if tools:
            kwargs["tools"] = tools

        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as exc:
            logger.warning("Claude API request failed: %s", exc)
            raise GatewayError(str(exc)) from exc

        try:
            content = _convert_content(response.content)
        except AttributeError as exc:
            msg = f"Malformed response from model: {exc}"
            raise GatewayError(msg) from exc

        return ModelResponse(content=content, stop_reason=StopReason.parse(response.stop_reason))
