"""Tests for the rich TerminalUI."""

import io

import pytest
from rich.console import Console

from onep.storage.models import Feature, Story
from onep.ui import PromptCancelledError, QuestionOption, TerminalUI, UserInterface


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def tui(out: io.StringIO) -> TerminalUI:
    return TerminalUI(Console(file=out, width=120, color_system=None))


def test_satisfies_protocol(tui: TerminalUI) -> None:
    assert isinstance(tui, UserInterface)


def test_story_list_grouped_by_status(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_story_list([
        Story(id="a", title="Draft story"),
        Story(id="b", title="Active story", status="in-progress", priority="high"),
        Story(id="c", title="Finished", status="done"),
    ])

    text = out.getvalue()
    assert text.index("IN-PROGRESS (1)") < text.index("DRAFT (1)") < text.index("DONE (1)")
    assert "[H] b: Active story" in text
    assert "READY" not in text


def test_empty_story_list(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_story_list([])
    assert "No stories found." in out.getvalue()


def test_progress_bar(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_progress("Completed", 1, 4)

    text = out.getvalue()
    assert "25% (1/4)" in text
    assert text.count("█") == 5
    assert text.count("░") == 15


def test_progress_bar_without_stories(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_progress("Completed", 0, 0)
    assert "0% (0/0)" in out.getvalue()


def test_feature_with_count(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_feature(
        Feature(id="auth", title="Authentication", success_criteria=["Fast logins"]), 3
    )

    text = out.getvalue()
    assert "Authentication [medium] DRAFT" in text
    assert "Stories: 3" in text
    assert "• Fast logins" in text


def test_draft_skips_empty_fields(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_draft("Story Draft", {"Title": "Reset", "Edge Cases": None, "AC": ["one"]})

    text = out.getvalue()
    assert "DRAFT: Story Draft" in text
    assert "• one" in text
    assert "Edge Cases" not in text


def test_markup_in_text_is_not_interpreted(tui: TerminalUI, out: io.StringIO) -> None:
    tui.display_text("Use [bold]brackets[/bold] freely")
    assert "[bold]brackets[/bold]" in out.getvalue()


async def test_single_choice_maps_number_to_value(tui, monkeypatch) -> None:
    monkeypatch.setattr("rich.prompt.Prompt.ask", lambda *a, **kw: "2")
    options = [QuestionOption("A", "a"), QuestionOption("B", "b")]

    assert await tui.ask_single_choice("Pick", options) == "b"


async def test_multi_choice_parses_numbers(tui, monkeypatch) -> None:
    monkeypatch.setattr("rich.prompt.Prompt.ask", lambda *a, **kw: "3, 1,3")
    options = [QuestionOption("A", "a"), QuestionOption("B", "b"), QuestionOption("C", "c")]

    assert await tui.ask_multi_choice("Pick", options) == ["c", "a"]


async def test_ctrl_c_becomes_prompt_cancelled(tui, monkeypatch) -> None:
    def interrupted(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr("rich.prompt.Confirm.ask", interrupted)

    with pytest.raises(PromptCancelledError):
        await tui.ask_yes_no("Sure?")
