"""Tests for the Settings model and persisted user settings."""

import stat

import pytest
import yaml

from onep.config import DEFAULT_MODEL, Settings, settings
from onep.llm.models import AVAILABLE_MODELS, friendly, get_model_info
from onep.user_settings import (
    UserSettings,
    delete_settings,
    get_api_key,
    get_model,
    is_valid_api_key_format,
    load_settings,
    mask_api_key,
    save_settings,
    settings_exist,
    update_settings,
)

KEY = "sk-ant-api03-" + "a" * 40


class TestDefaults:
    def test_default_rounds_and_tokens(self):
        s = Settings()
        assert s.max_tool_rounds == 25
        assert s.max_tokens == 4096

    def test_settings_path_under_home(self, tmp_path):
        s = Settings(onep_home=tmp_path)
        assert s.settings_path == tmp_path / "settings.yaml"

    def test_ignores_environment_under_pytest(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-from-env")
        assert Settings().anthropic_api_key == ""


class TestPersistence:
    def test_missing_file(self):
        assert not settings_exist()
        assert load_settings() is None

    def test_save_and_load(self):
        save_settings(UserSettings(api_key=KEY, model="claude-3-5-haiku-20241022"))

        assert settings_exist()
        loaded = load_settings()
        assert loaded.api_key == KEY
        assert loaded.model == "claude-3-5-haiku-20241022"

    def test_file_uses_camel_case_keys(self):
        save_settings(UserSettings(api_key=KEY))

        data = yaml.safe_load(settings.settings_path.read_text())
        assert set(data) == {"apiKey", "model", "createdAt", "updatedAt"}

    def test_file_is_owner_only(self):
        save_settings(UserSettings(api_key=KEY))

        mode = stat.S_IMODE(settings.settings_path.stat().st_mode)
        assert mode == 0o600

    def test_save_refreshes_updated_at(self):
        saved = save_settings(UserSettings(api_key=KEY, updated_at="2000-01-01T00:00:00"))
        assert saved.updated_at > "2000-01-01T00:00:00"

    def test_invalid_file_is_ignored(self):
        settings.settings_path.parent.mkdir(parents=True)
        settings.settings_path.write_text("apiKey: ''\n")
        assert load_settings() is None

    def test_update_merges(self):
        save_settings(UserSettings(api_key=KEY))

        updated = update_settings(model="claude-opus-4-5-20251101")

        assert updated.api_key == KEY
        assert load_settings().model == "claude-opus-4-5-20251101"

    def test_update_without_file(self):
        assert update_settings(model="x") is None

    def test_delete(self):
        save_settings(UserSettings(api_key=KEY))
        assert delete_settings() is True
        assert delete_settings() is False


class TestResolution:
    def test_nothing_configured(self):
        assert get_api_key() is None
        assert get_model() == DEFAULT_MODEL

    def test_file_values(self):
        save_settings(UserSettings(api_key=KEY, model="claude-3-5-haiku-20241022"))
        assert get_api_key() == KEY
        assert get_model() == "claude-3-5-haiku-20241022"

    def test_environment_wins(self, monkeypatch):
        save_settings(UserSettings(api_key=KEY, model="claude-3-5-haiku-20241022"))
        monkeypatch.setattr(settings, "anthropic_api_key", "sk-ant-env-" + "b" * 20)
        monkeypatch.setattr(settings, "claude_model", "claude-opus-4-5-20251101")

        assert get_api_key() == "sk-ant-env-" + "b" * 20
        assert get_model() == "claude-opus-4-5-20251101"


class TestKeyHelpers:
    @pytest.mark.parametrize(
        ("key", "valid"),
        [
            (KEY, True),
            ("sk-ant-short", False),
            ("sk-proj-" + "a" * 40, False),
            ("", False),
        ],
    )
    def test_is_valid_api_key_format(self, key, valid):
        assert is_valid_api_key_format(key) is valid

    def test_mask_long_key(self):
        assert mask_api_key("sk-ant-api03-abcdefWXYZ") == "sk-ant-a...WXYZ"

    def test_mask_short_key(self):
        assert mask_api_key("short") == "***"
        assert mask_api_key("x" * 12) == "***"


class TestModels:
    def test_lookup(self):
        info = get_model_info(DEFAULT_MODEL)
        assert info.name == "Claude Sonnet 4"
        assert get_model_info("nope") is None

    def test_friendly(self):
        assert friendly("claude-3-5-haiku-20241022") == "Claude 3.5 Haiku"
        assert friendly("custom-model") == "custom-model"

    def test_default_is_in_catalogue(self):
        assert DEFAULT_MODEL in [m.id for m in AVAILABLE_MODELS]
