# Config Manager Tests
"""
ConfigManager のテスト
"""

from pathlib import Path

import pytest
import yaml

from commy.api import CommyConfig, ConfigManager, StatsScope, load_config
from commy.errors import ConfigurationError, UnsupportedProviderError


class TestCommyConfig:
    """CommyConfig のテスト"""

    def test_defaults(self):
        config = CommyConfig()

        assert config.repository == Path(".")
        assert config.days == 7
        assert config.author is None
        assert config.provider == "mistral"
        assert config.language == "fr"
        assert config.timeout == 60.0
        assert config.output_path == Path("tasks.md")
        assert config.stats_scope is StatsScope.WINDOW

    def test_string_conversion(self):
        config = CommyConfig(repository="/srv/repo", output_path="out.md", stats_scope="history")

        assert config.repository == Path("/srv/repo")
        assert config.output_path == Path("out.md")
        assert config.stats_scope is StatsScope.HISTORY


class TestLoad:
    """YAML読み込みのテスト"""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "commy.yaml"
        path.write_text(
            "repository: /srv/project\n"
            "days: 14\n"
            "author: alice\n"
            "provider: claude\n"
            "language: en\n"
            "timeout: 30\n"
            "stats_scope: none\n",
            encoding="utf-8",
        )

        config = ConfigManager.from_yaml(path).config

        assert config.repository == Path("/srv/project")
        assert config.days == 14
        assert config.author == "alice"
        assert config.provider == "claude"
        assert config.language == "en"
        assert config.timeout == 30.0
        assert config.stats_scope is StatsScope.NONE

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert config == CommyConfig()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "commy.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigManager.from_yaml(path).config.days == 7

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "commy.yaml"
        path.write_text("days: [7\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigManager.from_yaml(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "commy.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigManager.from_yaml(path)


class TestValidation:
    """値の検証"""

    @pytest.mark.parametrize("days", ["soon", -1, None])
    def test_invalid_days(self, days):
        with pytest.raises(ConfigurationError):
            ConfigManager.from_dict({"days": days})

    def test_days_string_number(self):
        assert ConfigManager.from_dict({"days": "3"}).config.days == 3

    def test_zero_days(self):
        assert ConfigManager.from_dict({"days": 0}).config.days == 0

    def test_invalid_stats_scope(self):
        with pytest.raises(ConfigurationError):
            ConfigManager.from_dict({"stats_scope": "monthly"})

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError):
            ConfigManager.from_dict({"timeout": "forever"})

    def test_language(self):
        assert ConfigManager.from_dict({"language": "en"}).config.language == "en"

    def test_unknown_language(self):
        """未対応の言語は読み込み時に拒否"""
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager.from_dict({"language": "de"})

        assert "fr, en" in exc_info.value.message

    def test_unknown_language_in_config_object(self):
        with pytest.raises(ConfigurationError):
            ConfigManager.from_config(CommyConfig(language="de"))

    def test_unknown_language_in_yaml(self, tmp_path):
        path = tmp_path / "commy.yaml"
        path.write_text("language: de\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigManager.from_yaml(path)

    def test_timeout_disabled(self):
        assert ConfigManager.from_dict({"timeout": None}).config.timeout is None


class TestEnvironment:
    """環境変数による上書き"""

    def test_apply_env(self):
        manager = ConfigManager.from_dict({"provider": "mistral"})

        config = manager.apply_env(
            {
                "FOLDER": "/srv/other",
                "LAST_DAY": "30",
                "AUTHOR": "bob",
                "AI_PROVIDER": "chatgpt",
                "UNRELATED": "x",
            }
        )

        assert config.repository == Path("/srv/other")
        assert config.days == 30
        assert config.author == "bob"
        assert config.provider == "chatgpt"

    def test_empty_env_values_ignored(self):
        manager = ConfigManager.from_dict({"days": 5})

        config = manager.apply_env({"LAST_DAY": "", "AUTHOR": ""})

        assert config.days == 5
        assert config.author is None

    def test_invalid_env_days(self):
        with pytest.raises(ConfigurationError):
            ConfigManager.from_dict({}).apply_env({"LAST_DAY": "week"})

    def test_override_ignores_none(self):
        manager = ConfigManager.from_dict({"days": 5, "api_key": "sk-file"})

        config = manager.override(days=None, author="alice", provider=None)

        assert config.days == 5
        assert config.author == "alice"
        assert config.api_key == "sk-file"


class TestResolveApiKey:
    """resolve_api_key のテスト"""

    def test_explicit_key_wins(self):
        manager = ConfigManager.from_dict({"provider": "mistral", "api_key": "sk-explicit"})

        assert manager.resolve_api_key(environ={"MISTRAL_API_KEY": "sk-env"}) == "sk-explicit"

    def test_provider_variable(self):
        manager = ConfigManager.from_dict({"provider": "google"})

        assert manager.resolve_api_key(environ={"GEMINI_API_KEY": "sk-gemini"}) == "sk-gemini"

    def test_not_set(self):
        manager = ConfigManager.from_dict({"provider": "claude"})

        assert manager.resolve_api_key(environ={}) is None

    def test_unknown_provider(self):
        manager = ConfigManager.from_dict({"provider": "copilot"})

        with pytest.raises(UnsupportedProviderError):
            manager.resolve_api_key(environ={})


class TestSave:
    """save のテスト"""

    def test_round_trip_without_api_key(self, tmp_path):
        manager = ConfigManager.from_dict(
            {"days": 10, "provider": "claude", "api_key": "sk-secret", "stats_scope": "history"}
        )
        path = tmp_path / "nested" / "commy.yaml"

        manager.save(path)

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["days"] == 10
        assert data["provider"] == "claude"
        assert data["stats_scope"] == "history"
        assert "api_key" not in data
        assert "sk-secret" not in path.read_text(encoding="utf-8")

        reloaded = ConfigManager.from_yaml(path).config
        assert reloaded.days == 10
        assert reloaded.stats_scope is StatsScope.HISTORY

    def test_save_without_path(self):
        manager = ConfigManager.from_dict({})

        with pytest.raises(ValueError):
            manager.save()
