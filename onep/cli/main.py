"""one-p CLI entry point."""

import logging
from pathlib import Path

import typer

from onep import __version__
from onep.cli.commands import config, feature, story
from onep.cli.commands.chat import chat
from onep.cli.common import require_project, ui
from onep.config import settings
from onep.project import initialize_project
from onep.storage import StoryStore

app = typer.Typer(
    name="one-p",
    help="one-p - AI-powered story writing assistant for Business Analysts & Product Owners",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config.app, name="config", help="Manage one-p configuration")
app.add_typer(story.app, name="story", help="Manage user stories")
app.add_typer(feature.app, name="feature", help="Manage features/epics")
app.command("chat")(chat)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """one-p - AI-powered story writing assistant."""
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


@app.command("init")
def init(
    name: str = typer.Argument("my-project", help="Project name"),
    path: Path | None = typer.Option(
        None, "--path", "-p", help="Path for the project (default: ./<name>)"
    ),
) -> None:
    """Initialize a new one-p project."""
    project_path = path.resolve() if path else Path.cwd() / name

    ui.header(f"Initializing Project: {name}")
    try:
        project = initialize_project(project_path, name)
    except OSError as exc:
        ui.error(f"Failed to initialize project: {exc}")
        raise typer.Exit(1) from exc

    ui.success(f'Project "{project.name}" initialized at {project_path}')
    ui.console.print()
    ui.console.print("Next steps:")
    ui.console.print(f"  cd {name}")
    ui.console.print("  one-p chat")
    ui.console.print()


@app.command("search")
def search(query: str = typer.Argument(..., help="Text to look for")) -> None:
    """Search across all stories."""
    project_path, _ = require_project()

    ui.header(f'Search: "{query}"')
    stories = StoryStore(project_path).search_stories(query)
    if not stories:
        ui.info(f'No stories found matching "{query}".')
    else:
        ui.console.print(f"[bright_black]Found {len(stories)} matching stories:[/]")
        ui.display_story_list(stories)
    ui.console.print()


@app.command("version")
def version() -> None:
    """Show the one-p version."""
    ui.console.print(f"[bold blue]one-p[/bold blue] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
