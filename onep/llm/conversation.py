"""Conversation orchestrator — drives the model/tool round loop for one session."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from onep.config import settings
from onep.llm.messages import Message, ToolResultItem
from onep.llm.prompt import BA_SYSTEM_PROMPT
from onep.ui.base import PromptCancelledError

if TYPE_CHECKING:
    from onep.llm.gateway import ModelGateway
    from onep.llm.messages import ModelResponse
    from onep.tools.executor import ToolExecutor
    from onep.ui.base import UserInterface

logger = logging.getLogger(__name__)

CONTEXT_ACK = "I understand the context. How can I help you?"


class MaxToolRoundsError(RuntimeError):
    """The model kept requesting tools past the configured round limit."""

    def __init__(self, max_rounds: int) -> None:
        super().__init__(f"Exceeded maximum tool-call rounds ({max_rounds})")
        self.max_rounds = max_rounds


class ConversationManager:
    """Owns the message history of one chat session.

    Each ``chat()`` call appends the user's text and then loops: send the
    history to the model, show any text it returns, run the tools it asks
    for in order, and feed all of that round's results back as one user
    message. The loop ends when the model answers without tool calls.

    Gateway errors propagate and leave the history as it was after the
    last complete round. A cancelled prompt inside a tool propagates too,
    after the unanswered assistant message of that round is dropped.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        executor: ToolExecutor,
        ui: UserInterface,
        *,
        system_prompt: str = BA_SYSTEM_PROMPT,
        max_rounds: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._executor = executor
        self._ui = ui
        self._system_prompt = system_prompt
        if max_rounds is None:
            max_rounds = settings.max_tool_rounds
        if max_rounds < 1:
            msg = f"max_rounds must be at least 1, got {max_rounds}"
            raise ValueError(msg)
        self._max_rounds = max_rounds
        self._messages: list[Message] = []

    async def chat(self, user_text: str) -> None:
        """Send one user turn and resolve every tool round it triggers."""
        self._messages.append(Message.user(user_text))
        tools = self._executor.schemas

        for round_num in range(1, self._max_rounds + 1):
            with self._ui.thinking():
                response = await self._gateway.send(self._system_prompt, self._messages, tools)

            for text in response.texts:
                self._ui.display_text(text)

            tool_uses = response.tool_uses
            if not tool_uses:
                if response.stop_reason.is_terminal:
                    if response.content:
                        self._messages.append(Message.assistant(response.content))
                    return
                logger.warning(
                    "Round %d: stop reason %r without tool calls, asking again",
                    round_num,
                    str(response.stop_reason),
                )
                continue

            logger.info(
                "Round %d: %d tool call(s): %s",
                round_num,
                len(tool_uses),
                ", ".join(t.name for t in tool_uses),
            )
            await self._run_tools(response)

        logger.warning("Hit max tool rounds (%d)", self._max_rounds)
        raise MaxToolRoundsError(self._max_rounds)

    async def _run_tools(self, response: ModelResponse) -> None:
        self._messages.append(Message.assistant(response.content))

        results: list[ToolResultItem] = []
        try:
            for tool_use in response.tool_uses:
                self._ui.display_tool_usage(tool_use.name)
                result = await self._executor.execute(tool_use.name, tool_use.input)
                results.append(
                    ToolResultItem(
                        tool_use_id=tool_use.id,
                        content=result.to_content(),
                        is_error=not result.success,
                    )
                )
        except PromptCancelledError:
            # No tool_result will follow, so the request must not stay in history.
            self._messages.pop()
            raise

        self._messages.append(Message.user(tuple(results)))

    # -- Session helpers -------------------------------------------------------

    def add_context(self, text: str) -> None:
        """Prime the history with project context without calling the model."""
        self._messages.append(Message.user(f"[Context] {text}"))
        self._messages.append(Message.assistant(CONTEXT_ACK))

    def clear_history(self) -> None:
        self._messages.clear()

    def get_history(self) -> list[Message]:
        """Independent snapshot of the history.

        Tool inputs are plain dicts, so the copy is deep.
        """
        return copy.deepcopy(self._messages)
