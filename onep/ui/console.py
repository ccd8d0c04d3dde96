"""Rich terminal front end — colored output and blocking prompts."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.rule import Rule

from onep.ui.base import PromptCancelledError, QuestionOption

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager

    from onep.storage.models import Feature, Story

STATUS_STYLES = {
    "draft": "bright_black",
    "ready": "blue",
    "in-progress": "yellow",
    "done": "green",
}

PRIORITY_STYLES = {
    "low": "bright_black",
    "medium": "white",
    "high": "yellow",
    "critical": "red",
}

STATUS_ORDER = ("in-progress", "ready", "draft", "done")

PROGRESS_CELLS = 20


def _percent(current: int, total: int) -> int:
    if total <= 0:
        return 0
    return math.floor(current / total * 100 + 0.5)


class TerminalUI:
    """``UserInterface`` implementation backed by a rich ``Console``.

    Prompts block the event loop while waiting for input; there is only
    ever one prompt on screen at a time.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # -- Status lines ----------------------------------------------------------

    def header(self, text: str) -> None:
        self.console.print()
        self.console.print(Rule(f"[bold cyan]{escape(text)}[/]", style="cyan"))
        self.console.print()

    def subheader(self, text: str) -> None:
        self.console.print()
        self.console.print(f"[bold]▸ {escape(text)}[/]")
        self.console.print("[bright_black]" + "─" * 40 + "[/]")

    def success(self, text: str) -> None:
        self.console.print(f"[green]✓ {escape(text)}[/]")

    def error(self, text: str) -> None:
        self.console.print(f"[red]✗ {escape(text)}[/]")

    def warning(self, text: str) -> None:
        self.console.print(f"[yellow]⚠ {escape(text)}[/]")

    def info(self, text: str) -> None:
        self.console.print(f"[blue]ℹ {escape(text)}[/]")

    # -- Records ---------------------------------------------------------------

    @staticmethod
    def _badges(status: str, priority: str) -> str:
        p_style = PRIORITY_STYLES.get(priority, "white")
        s_style = STATUS_STYLES.get(status, "white")
        return f"[{p_style}]\\[{priority}][/] [{s_style}]{status.upper()}[/]"

    def display_story(self, story: Story, detailed: bool = False) -> None:
        self.console.print()
        self.console.print(
            f"[bold]{escape(story.title)}[/] {self._badges(story.status, story.priority)}"
        )
        self.console.print(
            f"[bright_black]ID: {escape(story.id)} | Feature: {escape(story.feature_id)}[/]"
        )
        if not detailed:
            return

        if story.as_a and story.i_want and story.so_that:
            self.console.print()
            self.console.print(f"  As a [cyan]{escape(story.as_a)}[/]")
            self.console.print(f"  I want [cyan]{escape(story.i_want)}[/]")
            self.console.print(f"  So that [cyan]{escape(story.so_that)}[/]")

        if story.acceptance_criteria:
            self.console.print()
            self.console.print("[bold]  Acceptance Criteria:[/]")
            for ac in story.acceptance_criteria:
                mark = "[green]✓[/]" if ac.completed else "[bright_black]○[/]"
                self.console.print(f"    {mark} {escape(ac.text)}")

        if story.open_questions:
            self.console.print()
            self.console.print("[bold]  Open Questions:[/]")
            for q in story.open_questions:
                self.console.print(f"[yellow]    ? {escape(q)}[/]")

        if story.edge_cases:
            self.console.print()
            self.console.print("[bold]  Edge Cases:[/]")
            for ec in story.edge_cases:
                self.console.print(f"[bright_black]    • {escape(ec)}[/]")

    def display_feature(self, feature: Feature, story_count: int | None = None) -> None:
        self.console.print()
        self.console.print(
            f"[bold]{escape(feature.title)}[/] {self._badges(feature.status, feature.priority)}"
        )
        self.console.print(f"[bright_black]ID: {escape(feature.id)}[/]")
        if feature.description:
            self.console.print(f"  {escape(feature.description)}")
        if story_count is not None:
            self.console.print(f"[bright_black]  Stories: {story_count}[/]")
        if feature.success_criteria:
            self.console.print("[bold]  Success Criteria:[/]")
            for sc in feature.success_criteria:
                self.console.print(f"[bright_black]    • {escape(sc)}[/]")

    def display_story_list(self, stories: list[Story]) -> None:
        """Show stories grouped by status, most active first."""
        if not stories:
            self.console.print("[bright_black]  No stories found.[/]")
            return

        for status in STATUS_ORDER:
            group = [s for s in stories if s.status == status]
            if not group:
                continue
            self.console.print()
            self.console.print(f"[{STATUS_STYLES[status]}]  {status.upper()} ({len(group)})[/]")
            for story in group:
                style = PRIORITY_STYLES.get(story.priority, "white")
                initial = story.priority[:1].upper()
                self.console.print(
                    f"    [{style}]\\[{initial}][/] {escape(story.id)}: {escape(story.title)}"
                )

    def display_progress(self, label: str, current: int, total: int) -> None:
        percentage = _percent(current, total)
        filled = math.floor(percentage / 5 + 0.5)
        bar = "[green]" + "█" * filled + "[/][bright_black]" + "░" * (PROGRESS_CELLS - filled) + "[/]"
        self.console.print(f"  {escape(label)}: {bar} {percentage}% ({current}/{total})")

    def display_draft(self, title: str, fields: dict[str, Any]) -> None:
        lines: list[str] = []
        for key, value in fields.items():
            if value is None:
                continue
            lines.append(f"[bold]{escape(key)}:[/]")
            if isinstance(value, list):
                lines.extend(f"  • {escape(str(item))}" for item in value)
            else:
                lines.append(f"  {escape(str(value))}")
        self.console.print()
        self.console.print(
            Panel("\n".join(lines), title=f"📝 DRAFT: {escape(title)}", border_style="magenta")
        )
        self.console.print()

    # -- Assistant output ------------------------------------------------------

    def display_text(self, text: str) -> None:
        """Render assistant text with light emphasis for headings and bold lines."""
        for line in text.split("\n"):
            if line.startswith("##"):
                self.console.print(f"[bold cyan]{escape(line)}[/]")
            elif line.startswith("- "):
                self.console.print(f"  {escape(line)}")
            elif line.startswith("**"):
                self.console.print(f"[bold]{escape(line)}[/]")
            else:
                self.console.print(escape(line))

    def display_tool_usage(self, tool_name: str) -> None:
        self.console.print(f"[bright_black]  ⚙ Using {escape(tool_name)}...[/]")

    def thinking(self) -> AbstractContextManager[Any]:
        return self.console.status("[cyan]Thinking...[/]", spinner="dots")

    # -- Prompts ---------------------------------------------------------------

    def _ask(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, console=self.console, **kwargs)
        except (KeyboardInterrupt, EOFError) as exc:
            raise PromptCancelledError from exc

    def _print_options(self, question: str, options: list[QuestionOption]) -> None:
        self.console.print()
        self.console.print(f"[bold green]?[/] [bold]{escape(question)}[/]")
        for i, opt in enumerate(options, 1):
            line = f"  [cyan]{i}.[/] {escape(opt.label)}"
            if opt.description:
                line += f" [bright_black]- {escape(opt.description)}[/]"
            self.console.print(line)

    async def ask_single_choice(self, question: str, options: list[QuestionOption]) -> str:
        self._print_options(question, options)
        choices = [str(i) for i in range(1, len(options) + 1)]
        picked = self._ask(Prompt.ask, "Choose", choices=choices, show_choices=False)
        return options[int(picked) - 1].value

    async def ask_multi_choice(self, question: str, options: list[QuestionOption]) -> list[str]:
        self._print_options(question, options)
        while True:
            raw = self._ask(Prompt.ask, "Choose (comma-separated numbers)")
            try:
                indexes = [int(part) for part in raw.split(",") if part.strip()]
            except ValueError:
                indexes = []
            if indexes and all(1 <= i <= len(options) for i in indexes):
                seen: list[int] = []
                for i in indexes:
                    if i not in seen:
                        seen.append(i)
                return [options[i - 1].value for i in seen]
            self.error(f"Enter numbers between 1 and {len(options)}")

    async def ask_free_text(self, prompt: str) -> str:
        return self._ask(Prompt.ask, f"[bold]{escape(prompt)}[/]")

    async def ask_yes_no(self, prompt: str, default: bool = True) -> bool:
        return self._ask(Confirm.ask, f"[bold]{escape(prompt)}[/]", default=default)

    def ask_password(self, prompt: str) -> str:
        return self._ask(Prompt.ask, f"[bold]{escape(prompt)}[/]", password=True)

    def ask_input(self, prompt: str = "You") -> str:
        """Read one line of chat input."""
        return self._ask(Prompt.ask, f"\n[bold green]{escape(prompt)}[/]")
