"""First-run setup: ask for an API key and a model, then save them."""

from __future__ import annotations

import asyncio
import logging

from onep.cli.common import ui
from onep.config import DEFAULT_MODEL, settings
from onep.llm.models import AVAILABLE_MODELS
from onep.ui import PromptCancelledError, QuestionOption
from onep.user_settings import (
    UserSettings,
    get_api_key,
    is_valid_api_key_format,
    save_settings,
    settings_exist,
)

logger = logging.getLogger(__name__)


def prompt_api_key(prompt: str = "Enter your Anthropic API key") -> str:
    """Ask until the user enters a well-formed key."""
    while True:
        key = ui.ask_password(prompt).strip()
        if not key:
            ui.error("API key is required")
        elif not is_valid_api_key_format(key):
            ui.error('Invalid API key format. It should start with "sk-ant-"')
        else:
            return key


async def prompt_model() -> str:
    options = [
        QuestionOption(label=m.name, value=m.id, description=m.description)
        for m in AVAILABLE_MODELS
    ]
    return await ui.ask_single_choice("Select a model:", options)


async def run_initial_setup() -> UserSettings | None:
    """Interactive wizard. Returns the saved settings, or None if cancelled."""
    ui.header("Welcome to one-p!")
    ui.console.print("[cyan]Before we begin, let's configure your settings.[/]")
    ui.console.print(f"[bright_black]Settings will be stored in {settings.settings_path}[/]")
    ui.console.print()

    try:
        ui.console.print("[bold]Step 1: API Key[/]")
        ui.console.print("[bright_black]You need an Anthropic API key to use one-p.[/]")
        ui.console.print("[bright_black]Get one at: https://console.anthropic.com/[/]")
        api_key = prompt_api_key()

        ui.console.print()
        ui.console.print("[bold]Step 2: Select Model[/]")
        ui.console.print("[bright_black]Choose the Claude model you want to use.[/]")
        model = await prompt_model()
    except PromptCancelledError:
        ui.console.print()
        ui.warning("Setup cancelled.")
        return None

    saved = save_settings(UserSettings(api_key=api_key, model=model or DEFAULT_MODEL))
    ui.console.print()
    ui.success("Settings saved successfully!")
    ui.console.print(f"[bright_black]Configuration stored in {settings.settings_path}[/]")
    ui.console.print()
    return saved


def ensure_api_key() -> bool:
    """Make sure a key is resolvable, running the wizard on first use."""
    if not settings.anthropic_api_key and not settings_exist():
        ui.console.print("[cyan]First time setup required.[/]")
        ui.console.print()
        if asyncio.run(run_initial_setup()) is None:
            ui.error("Setup cancelled.")
            return False

    if not get_api_key():
        ui.error("No API key configured.")
        ui.console.print('Run "one-p config" to set up your API key.')
        return False
    return True
