"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "claude-sonnet-4-20250514"


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """one-p configuration. Values come from environment variables.

    The API key and model can also be persisted in ``~/.one-p/settings.yaml``
    (see ``onep.user_settings``); environment values win over the file.
    """

    # Anthropic
    anthropic_api_key: str = Field(default="")
    claude_model: str = Field(default="")
    max_tokens: int = Field(default=4096)

    # Conversation
    max_tool_rounds: int = Field(default=25)

    # Home directory for persisted user settings
    onep_home: Path = Field(default_factory=lambda: Path.home() / ".one-p")

    # Logging
    log_level: str = Field(default="WARNING")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @property
    def settings_path(self) -> Path:
        """Location of the persisted user settings file."""
        return self.onep_home / "settings.yaml"


settings = Settings()
