"""chat command - interactive story-writing session."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import typer

from onep.cli.common import build_conversation, require_project, run_repl, ui
from onep.cli.setup import ensure_api_key
from onep.llm.gateway import MissingCredentialError

if TYPE_CHECKING:
    from pathlib import Path

    from onep.llm.conversation import ConversationManager
    from onep.project import ProjectConfig


def open_conversation() -> tuple[ConversationManager, Path, ProjectConfig | None]:
    """Resolve credentials and the project, then build a chat session.

    Exits with status 1 when either is missing.
    """
    if not ensure_api_key():
        raise typer.Exit(1)
    project_path, project_config = require_project()
    try:
        conversation = build_conversation(project_path)
    except MissingCredentialError as exc:
        ui.error(str(exc))
        raise typer.Exit(1) from exc
    return conversation, project_path, project_config


def chat() -> None:
    """Start an interactive AI chat session for story writing."""
    conversation, project_path, project_config = open_conversation()

    ui.header("One-P Interactive Chat")
    name = project_config.name if project_config else "Unknown"
    ui.console.print(f"[bright_black]Project: {name}[/]")
    ui.console.print(f"[bright_black]Path: {project_path}[/]")
    ui.console.print()
    ui.console.print(
        "[cyan]I'm your AI assistant for writing user stories and managing requirements.[/]"
    )
    ui.console.print('[cyan]Type your message and press Enter. Type "exit" or "quit" to leave.[/]')

    if project_config:
        conversation.add_context(
            f"Current project: {project_config.name}. {project_config.description or ''}"
        )

    asyncio.run(
        run_repl(conversation, farewell="Goodbye! Your stories are saved in the project folder.")
    )
