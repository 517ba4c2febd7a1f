# Commy Config Manager
"""
commy.api.config - 設定マネージャー

YAMLファイル、辞書、環境変数（FOLDER / LAST_DAY / AUTHOR / AI_PROVIDER）
から CommyConfig を構築する。APIキーはプロバイダーの環境変数から
一度だけ読み、以降は値として受け渡す。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from commy.api.base import CommyConfig, StatsScope
from commy.errors import ConfigurationError
from commy.providers.prompts import PROMPTS
from commy.providers.registry import ProviderRegistry

# 環境変数 → 設定キー
ENV_VARIABLES = {
    "FOLDER": "repository",
    "LAST_DAY": "days",
    "AUTHOR": "author",
    "AI_PROVIDER": "provider",
}


class ConfigManager:
    """設定マネージャー"""

    def __init__(self, config_path: str | Path | None = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: CommyConfig | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> ConfigManager:
        """YAMLファイルから読み込み"""
        manager = cls(path)
        manager.load()
        return manager

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> ConfigManager:
        """辞書から作成"""
        manager = cls()
        manager._config = cls._parse_config(config_dict)
        return manager

    @classmethod
    def from_config(cls, config: CommyConfig) -> ConfigManager:
        """CommyConfigから作成（値は辞書経由と同じ検証を受ける）"""
        data = cls._config_to_dict(config)
        data["api_key"] = config.api_key
        manager = cls()
        manager._config = cls._parse_config(data)
        return manager

    def load(self) -> CommyConfig:
        """設定を読み込み"""
        if not self.config_path or not self.config_path.exists():
            self._config = CommyConfig()
            return self._config

        with open(self.config_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in {self.config_path}: {e}",
                    cause=e,
                    component="config",
                ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {self.config_path}",
                component="config",
            )

        self._config = self._parse_config(data)
        return self._config

    def save(self, path: str | Path | None = None) -> None:
        """設定を保存（APIキーは書き出さない）"""
        if self._config is None:
            return

        save_path = Path(path) if path else self.config_path
        if save_path is None:
            raise ValueError("No path specified for saving config")

        save_path.parent.mkdir(parents=True, exist_ok=True)

        data = self._config_to_dict(self._config)
        with open(save_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def apply_env(self, environ: Mapping[str, str] | None = None) -> CommyConfig:
        """環境変数で設定を上書き"""
        env = os.environ if environ is None else environ
        overrides = {
            key: env[var] for var, key in ENV_VARIABLES.items() if env.get(var)
        }
        return self.override(**overrides)

    def override(self, **values: Any) -> CommyConfig:
        """None以外の値で設定を上書き"""
        updates = {key: value for key, value in values.items() if value is not None}
        if updates:
            data = self._config_to_dict(self.config)
            data["api_key"] = self.config.api_key
            data.update(updates)
            self._config = self._parse_config(data)
        return self.config

    def resolve_api_key(
        self,
        registry: ProviderRegistry | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> str | None:
        """明示されたAPIキー、なければプロバイダーの環境変数の値"""
        if self.config.api_key:
            return self.config.api_key
        registry = registry or ProviderRegistry()
        return registry.credential_from_env(self.config.provider, environ)

    @staticmethod
    def _parse_config(data: dict[str, Any]) -> CommyConfig:
        """設定をパース"""
        try:
            days = int(data.get("days", 7))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"days must be an integer, got {data.get('days')!r}",
                component="config",
            ) from e
        if days < 0:
            raise ConfigurationError(f"days must be >= 0, got {days}", component="config")

        stats_raw = data.get("stats_scope", "window")
        try:
            stats_scope = (
                stats_raw if isinstance(stats_raw, StatsScope) else StatsScope(str(stats_raw).lower())
            )
        except ValueError as e:
            raise ConfigurationError(
                f"stats_scope must be one of: {', '.join(s.value for s in StatsScope)}",
                component="config",
            ) from e

        timeout_raw = data.get("timeout", 60.0)
        try:
            timeout = float(timeout_raw) if timeout_raw is not None else None
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"timeout must be a number of seconds, got {timeout_raw!r}",
                component="config",
            ) from e

        language = data.get("language", "fr")
        if language not in PROMPTS:
            raise ConfigurationError(
                f"language must be one of: {', '.join(PROMPTS)}, got {language!r}",
                component="config",
            )

        return CommyConfig(
            repository=Path(data.get("repository", ".")),
            days=days,
            author=data.get("author") or None,
            provider=str(data.get("provider", "mistral")),
            api_key=data.get("api_key") or None,
            model=data.get("model") or None,
            language=language,
            timeout=timeout,
            date_format=data.get("date_format", "%d/%m/%Y"),
            output_path=Path(data.get("output_path", "tasks.md")),
            stats_scope=stats_scope,
        )

    @staticmethod
    def _config_to_dict(config: CommyConfig) -> dict[str, Any]:
        """CommyConfigを辞書に変換"""
        return {
            "repository": str(config.repository),
            "days": config.days,
            "author": config.author,
            "provider": config.provider,
            "model": config.model,
            "language": config.language,
            "timeout": config.timeout,
            "date_format": config.date_format,
            "output_path": str(config.output_path),
            "stats_scope": config.stats_scope.value,
        }

    @property
    def config(self) -> CommyConfig:
        """設定を取得"""
        if self._config is None:
            self._config = self.load()
        return self._config


def load_config(path: str | Path | None = None) -> CommyConfig:
    """設定を読み込むヘルパー関数"""
    manager = ConfigManager(path)
    return manager.load()
