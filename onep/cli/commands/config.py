"""config command group - API key and model stored in ~/.one-p/settings.yaml."""

import asyncio

import typer

from onep.cli.common import ui
from onep.cli.setup import prompt_api_key, prompt_model, run_initial_setup
from onep.config import settings
from onep.llm.models import friendly, get_model_info
from onep.ui import PromptCancelledError, QuestionOption
from onep.user_settings import (
    delete_settings,
    load_settings,
    mask_api_key,
    settings_exist,
    update_settings,
)

app = typer.Typer(help="Manage one-p configuration", invoke_without_command=True)


@app.callback()
def config_main(ctx: typer.Context) -> None:
    """Run first-time setup, or show the current configuration."""
    if ctx.invoked_subcommand is not None:
        return
    if settings_exist():
        show_config()
    else:
        asyncio.run(run_initial_setup())


@app.command("show")
def show_config() -> None:
    """Display current configuration."""
    saved = load_settings()

    ui.header("Current Configuration")
    if saved is None:
        ui.warning("No configuration found.")
        ui.console.print('[bright_black]Run "one-p config" to set up.[/]')
        return

    ui.console.print("[bold]API Key:[/]")
    ui.console.print(f"  {mask_api_key(saved.api_key)}")
    ui.console.print()

    ui.console.print("[bold]Model:[/]")
    info = get_model_info(saved.model)
    if info:
        ui.console.print(f"  {info.name} ({saved.model})")
        ui.console.print(f"[bright_black]  {info.description}[/]")
    else:
        ui.console.print(f"  {saved.model}")
    ui.console.print()

    ui.console.print("[bold]Config Location:[/]")
    ui.console.print(f"[bright_black]  {settings.settings_path}[/]")
    ui.console.print()
    ui.console.print(f"[bright_black]Created: {saved.created_at}[/]")
    ui.console.print(f"[bright_black]Updated: {saved.updated_at}[/]")


def _setup_instead() -> bool:
    """Run the wizard when nothing is saved yet. Returns True if it ran."""
    if settings_exist():
        return False
    ui.warning("No configuration found. Running initial setup...")
    asyncio.run(run_initial_setup())
    return True


def _set_key() -> None:
    saved = load_settings()
    if saved is None:
        return
    ui.console.print()
    ui.console.print(f"[bright_black]Current API key: {mask_api_key(saved.api_key)}[/]")
    api_key = prompt_api_key("Enter new API key")
    update_settings(api_key=api_key)
    ui.success("API key updated successfully!")


def _set_model() -> None:
    saved = load_settings()
    if saved is None:
        return
    ui.console.print()
    ui.console.print(f"[bright_black]Current model: {friendly(saved.model)}[/]")
    model = asyncio.run(prompt_model())
    update_settings(model=model)
    ui.success(f"Model updated to {friendly(model)}!")


@app.command("set")
def set_config() -> None:
    """Update configuration settings."""
    if _setup_instead():
        return

    ui.header("Update Configuration")
    options = [
        QuestionOption(label="API Key", value="api_key"),
        QuestionOption(label="Model", value="model"),
        QuestionOption(label="Both", value="both"),
        QuestionOption(label="Cancel", value="cancel"),
    ]
    try:
        choice = asyncio.run(ui.ask_single_choice("What would you like to update?", options))
        if choice == "cancel":
            ui.console.print("[bright_black]Cancelled.[/]")
            return
        if choice in ("api_key", "both"):
            _set_key()
        if choice in ("model", "both"):
            _set_model()
    except PromptCancelledError:
        ui.console.print("[bright_black]Cancelled.[/]")


@app.command("set-key")
def set_key() -> None:
    """Set or update the API key."""
    if _setup_instead():
        return
    try:
        _set_key()
    except PromptCancelledError:
        ui.console.print("[bright_black]Cancelled.[/]")


@app.command("set-model")
def set_model() -> None:
    """Set or update the Claude model."""
    if _setup_instead():
        return
    try:
        _set_model()
    except PromptCancelledError:
        ui.console.print("[bright_black]Cancelled.[/]")


@app.command("reset")
def reset_config() -> None:
    """Reset all settings (requires confirmation)."""
    if not settings_exist():
        ui.info("No configuration to reset.")
        return

    ui.warning("This will delete all your one-p settings including your API key.")
    try:
        confirmed = asyncio.run(
            ui.ask_yes_no("Are you sure you want to reset all settings?", default=False)
        )
    except PromptCancelledError:
        confirmed = False
    if not confirmed:
        ui.console.print("[bright_black]Cancelled.[/]")
        return

    delete_settings()
    ui.success("Settings have been reset.")
    ui.console.print('[bright_black]Run "one-p config" to set up again.[/]')


@app.command("path")
def config_path() -> None:
    """Show configuration directory path."""
    typer.echo(settings.onep_home)
