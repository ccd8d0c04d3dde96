"""Shared test fixtures."""

import pytest

from onep.config import settings
from onep.storage import StoryStore
from onep.tools import ToolContext, ToolExecutor
from tests.fakes import FakeUI


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real ~/.one-p and the developer's environment."""
    monkeypatch.setattr(settings, "onep_home", tmp_path / "home")
    monkeypatch.setattr(settings, "anthropic_api_key", "")
    monkeypatch.setattr(settings, "claude_model", "")


@pytest.fixture
def store(tmp_path) -> StoryStore:
    """A StoryStore rooted in a temporary project directory."""
    return StoryStore(tmp_path / "project")


@pytest.fixture
def ui() -> FakeUI:
    return FakeUI()


@pytest.fixture
def ctx(store: StoryStore, ui: FakeUI) -> ToolContext:
    return ToolContext(store=store, ui=ui)


@pytest.fixture
def executor(store: StoryStore, ui: FakeUI) -> ToolExecutor:
    return ToolExecutor(store, ui)
