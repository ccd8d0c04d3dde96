"""Terminal user interface."""

from onep.ui.base import PromptCancelledError, QuestionOption, UserInterface
from onep.ui.console import TerminalUI

__all__ = ["PromptCancelledError", "QuestionOption", "TerminalUI", "UserInterface"]
