"""story command group - create, list, show and review user stories."""

import asyncio

import typer

from onep.cli.commands.chat import open_conversation
from onep.cli.common import require_project, run_repl, send, ui
from onep.llm.prompt import build_review_request
from onep.storage import StoryStore
from onep.storage.models import BACKLOG, STATUSES

app = typer.Typer(help="Manage user stories", no_args_is_help=True)

NEW_STORY_REQUEST = (
    "I want to create a new user story. "
    "Please help me by asking questions about what I need."
)


@app.command("new")
def new_story() -> None:
    """Create a new user story with AI guidance."""
    conversation, _, _ = open_conversation()

    ui.header("Create New Story")
    ui.console.print(
        "[cyan]I'll help you write a user story. "
        "Let's start by understanding what you need.[/]"
    )

    async def session() -> None:
        await send(conversation, NEW_STORY_REQUEST)
        await run_repl(
            conversation,
            exit_words=("done", "exit"),
            farewell="Story creation session ended.",
            inner_commands=False,
        )

    asyncio.run(session())


@app.command("list")
def list_stories(
    feature: str | None = typer.Option(None, "--feature", "-f", help="Filter by feature"),
    status: str | None = typer.Option(
        None, "--status", "-s", help=f"Filter by status ({', '.join(STATUSES)})"
    ),
) -> None:
    """List all stories."""
    project_path, _ = require_project()
    ui.header("Stories")

    try:
        stories = StoryStore(project_path).list_stories(feature)
    except ValueError as exc:
        ui.error(str(exc))
        raise typer.Exit(1) from exc
    if status:
        stories = [s for s in stories if s.status == status]

    if not stories:
        ui.info("No stories found.")
        ui.console.print("[bright_black]Create one with: one-p story new[/]")
    else:
        ui.display_story_list(stories)
    ui.console.print()


@app.command("show")
def show_story(
    story_id: str = typer.Argument(..., metavar="ID", help="Story ID"),
    feature: str = typer.Option(
        BACKLOG, "--feature", "-f", help="Feature containing the story"
    ),
) -> None:
    """Show details of a specific story."""
    project_path, _ = require_project()

    try:
        story = StoryStore(project_path).get_story(feature, story_id)
    except ValueError as exc:
        ui.error(str(exc))
        raise typer.Exit(1) from exc
    if story is None:
        ui.error(f'Story "{story_id}" not found in feature "{feature}".')
        raise typer.Exit(1)

    ui.header(f"Story: {story.title}")
    ui.display_story(story, detailed=True)
    ui.console.print()


@app.command("review")
def review_story(
    story_id: str = typer.Argument(..., metavar="ID", help="Story ID"),
    feature: str = typer.Option(
        BACKLOG, "--feature", "-f", help="Feature containing the story"
    ),
) -> None:
    """AI review of story quality (INVEST criteria)."""
    conversation, _, _ = open_conversation()

    ui.header(f"Reviewing Story: {story_id}")
    ok = asyncio.run(send(conversation, build_review_request(story_id, feature)))
    ui.console.print()
    if not ok:
        raise typer.Exit(1)
