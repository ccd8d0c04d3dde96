"""Helpers shared by CLI commands: the console UI, project lookup, chat REPL."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import typer

from onep.llm.conversation import ConversationManager, MaxToolRoundsError
from onep.llm.gateway import AnthropicGateway, GatewayError
from onep.project import load_app_config
from onep.storage import StoryStore
from onep.tools import ToolExecutor
from onep.ui import PromptCancelledError, TerminalUI

if TYPE_CHECKING:
    from pathlib import Path

    from onep.project import ProjectConfig

logger = logging.getLogger(__name__)

ui = TerminalUI()


def require_project() -> tuple[Path, ProjectConfig | None]:
    """Return the current project root and its config, or exit with a hint."""
    app_config = load_app_config()
    if app_config.project_path is None:
        ui.warning('No one-p project found. Run "one-p init" first.')
        raise typer.Exit(1)
    return app_config.project_path, app_config.project_config


def build_conversation(project_path: Path) -> ConversationManager:
    """Wire a gateway, executor and the terminal UI into a chat session.

    Raises ``MissingCredentialError`` when no API key can be resolved.
    """
    gateway = AnthropicGateway.from_settings()
    executor = ToolExecutor(StoryStore(project_path), ui)
    return ConversationManager(gateway, executor, ui)


async def send(conversation: ConversationManager, text: str) -> bool:
    """Run one chat turn, reporting failures instead of raising. Returns success."""
    try:
        await conversation.chat(text)
    except PromptCancelledError:
        ui.console.print()
        ui.warning("Cancelled.")
        return False
    except (GatewayError, MaxToolRoundsError) as exc:
        ui.error(f"Error: {exc}")
        return False
    except Exception as exc:
        logger.exception("Chat turn failed")
        ui.error(f"Error: {exc}")
        return False
    return True


def show_chat_help() -> None:
    ui.console.print()
    ui.console.print("[bold]Chat Commands:[/]")
    ui.console.print("[bright_black]  exit, quit  - End the chat session[/]")
    ui.console.print("[bright_black]  clear       - Clear conversation history[/]")
    ui.console.print("[bright_black]  help        - Show this help message[/]")
    ui.console.print()
    ui.console.print("[bold]Things you can ask me:[/]")
    ui.console.print('[bright_black]  - "Help me write a user story for \\[feature]"[/]')
    ui.console.print('[bright_black]  - "Create a new feature called \\[name]"[/]')
    ui.console.print('[bright_black]  - "List all stories"[/]')
    ui.console.print('[bright_black]  - "Review the story \\[id] for quality"[/]')
    ui.console.print('[bright_black]  - "Search for stories about \\[topic]"[/]')
    ui.console.print()


async def run_repl(
    conversation: ConversationManager,
    *,
    exit_words: tuple[str, ...] = ("exit", "quit"),
    farewell: str,
    inner_commands: bool = True,
) -> None:
    """Read lines from the user until an exit word, Ctrl+C or end of input.

    With ``inner_commands``, ``clear`` and ``help`` are handled locally.
    """
    while True:
        try:
            text = ui.ask_input("You").strip()
        except PromptCancelledError:
            text = exit_words[0]

        if not text:
            continue

        command = text.lower()
        if command in exit_words:
            ui.console.print()
            ui.console.print(f"[cyan]{farewell}[/]")
            return
        if inner_commands and command == "clear":
            conversation.clear_history()
            ui.console.print("[bright_black]Conversation history cleared.[/]")
            continue
        if inner_commands and command == "help":
            show_chat_help()
            continue

        await send(conversation, text)
