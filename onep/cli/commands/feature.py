"""feature command group - create, list and show features (epics)."""

import asyncio

import typer

from onep.cli.commands.chat import open_conversation
from onep.cli.common import require_project, run_repl, send, ui
from onep.storage import StoryStore

app = typer.Typer(help="Manage features/epics", no_args_is_help=True)

NEW_FEATURE_REQUEST = (
    "I want to create a new feature/epic. "
    "Please help me define it with proper structure and success criteria."
)


@app.command("new")
def new_feature() -> None:
    """Create a new feature/epic with AI guidance."""
    conversation, _, _ = open_conversation()

    ui.header("Create New Feature")
    ui.console.print(
        "[cyan]I'll help you define a new feature. "
        "Let's understand what you're building.[/]"
    )

    async def session() -> None:
        await send(conversation, NEW_FEATURE_REQUEST)
        await run_repl(
            conversation,
            exit_words=("done", "exit"),
            farewell="Feature creation session ended.",
            inner_commands=False,
        )

    asyncio.run(session())


@app.command("list")
def list_features() -> None:
    """List all features/epics with their progress."""
    project_path, _ = require_project()
    ui.header("Features")

    store = StoryStore(project_path)
    features = store.list_features()
    if not features:
        ui.info("No features found.")
        ui.console.print("[bright_black]Create one with: one-p feature new[/]")

    for feature in features:
        stories = store.list_stories(feature.id)
        ui.display_feature(feature, len(stories))
        if stories:
            done = sum(1 for s in stories if s.status == "done")
            in_progress = sum(1 for s in stories if s.status == "in-progress")
            ui.console.print()
            ui.display_progress("Completed", done, len(stories))
            ui.display_progress("In Progress", in_progress, len(stories))

    ui.console.print()


@app.command("show")
def show_feature(
    feature_id: str = typer.Argument(..., metavar="ID", help="Feature ID"),
) -> None:
    """Show details of a specific feature."""
    project_path, _ = require_project()
    store = StoryStore(project_path)

    try:
        feature = store.get_feature(feature_id)
    except ValueError as exc:
        ui.error(str(exc))
        raise typer.Exit(1) from exc
    if feature is None:
        ui.error(f'Feature "{feature_id}" not found.')
        raise typer.Exit(1)

    ui.header(f"Feature: {feature.title}")
    ui.display_feature(feature)

    stories = store.list_stories(feature_id)
    if stories:
        ui.console.print()
        ui.console.print("[bold]Stories:[/]")
        for story in stories:
            ui.console.print(
                f"[bright_black]  - \\[{story.status}] {story.id}: {story.title}[/]"
            )
    ui.console.print()
