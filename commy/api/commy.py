# Commy Main Facade
"""
commy.api.commy - メインFacade API

1回の実行で リポジトリ検証 → コミット取得 → 著者フィルタ →
グループ化 → 再構成 → レポート組み立て を行う。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from commy.api.base import CommyConfig, ReportResult, StatsScope
from commy.api.config import ConfigManager
from commy.commits import (
    AuthorGroup,
    GitCommitSource,
    count_by_author,
    filter_by_author,
    group_by_author,
)
from commy.errors import ConfigurationError, ErrorHandler, RepositoryError, get_error_handler
from commy.providers.registry import ProviderRegistry
from commy.report import ReformulationOrchestrator, ReportAssembler

logger = logging.getLogger(__name__)


class Commy:
    """Commy メインAPI (Facade)"""

    def __init__(
        self,
        config: str | Path | dict[str, Any] | CommyConfig | None = None,
        source: GitCommitSource | None = None,
        registry: ProviderRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
        error_handler: ErrorHandler | None = None,
    ):
        """
        Commy を初期化

        Args:
            config: 設定ファイルパス、辞書、またはCommyConfigオブジェクト
            source: コミット取得元（省略時はgit CLI）
            registry: プロバイダーレジストリ
            clock: 現在時刻の取得関数
            error_handler: 回復したエラーの記録先（省略時はグローバル）
        """
        if config is None:
            self._config_manager = ConfigManager()
        elif isinstance(config, (str, Path)):
            self._config_manager = ConfigManager.from_yaml(config)
        elif isinstance(config, dict):
            self._config_manager = ConfigManager.from_dict(config)
        elif isinstance(config, CommyConfig):
            self._config_manager = ConfigManager.from_config(config)
        else:
            raise ValueError(f"Invalid config type: {type(config)}")

        self.registry = registry or ProviderRegistry()
        self.source = source or GitCommitSource(date_format=self.config.date_format)
        self._clock = clock or datetime.now
        self.error_handler = error_handler or get_error_handler()

    @property
    def config(self) -> CommyConfig:
        """設定を取得"""
        return self._config_manager.config

    @property
    def config_manager(self) -> ConfigManager:
        return self._config_manager

    # ========== レポート生成 ==========

    async def generate(self, write: bool = True) -> ReportResult:
        """
        レポートを生成

        Args:
            write: output_path にレポートを書き出すか

        Returns:
            ReportResult

        Raises:
            RepositoryError: リポジトリが無効、またはコミット取得に失敗した場合
            UnsupportedProviderError: プロバイダーが未知の場合
            ConfigurationError: APIキーが未設定の場合
        """
        cfg = self.config
        repository = cfg.repository
        # エラー統計はこの実行の分だけを報告する
        self.error_handler.clear_stats()

        if not await self.source.validate(repository):
            raise RepositoryError(
                f'"{repository}" is not a valid git repository',
                repository=str(repository),
                component="commy",
            )
        repository_info = await self.source.describe(repository)
        logger.info(
            "Repository %s (branch: %s, remote: %s)",
            repository,
            repository_info.current_branch,
            repository_info.remote_url,
        )

        # プロバイダーとAPIキーはコミット取得前に確定する
        descriptor = self.registry.resolve(cfg.provider)
        credential = self._config_manager.resolve_api_key(self.registry)
        if not credential:
            raise ConfigurationError(
                f"{descriptor.credential_env_var} is not set",
                component="commy",
                provider=descriptor.id.value,
            )

        since = (self._clock() - timedelta(days=cfg.days)).date()
        commits = await self.source.fetch_since(repository, since)
        if cfg.author:
            commits = filter_by_author(commits, cfg.author)
            logger.info("Filtered to %d commits by author containing %r", len(commits), cfg.author)

        groups = group_by_author(commits)
        logger.info("Grouped %d commits into %d authors", len(commits), len(groups))

        author_stats = await self._author_stats(groups)

        orchestrator = ReformulationOrchestrator(
            self.registry,
            error_handler=self.error_handler,
            model=cfg.model,
            timeout=cfg.timeout,
            language=cfg.language,
        )
        author_tasks = await orchestrator.run(groups, descriptor.id, credential)

        assembler = ReportAssembler(clock=self._clock, date_format=cfg.date_format)
        report = assembler.build(author_tasks, author_stats)

        output_path = None
        if write:
            output_path = self._write(report, cfg.output_path)

        return ReportResult(
            report=report,
            commit_count=len(commits),
            author_count=len(groups),
            provider=descriptor.display_name,
            repository_info=repository_info,
            degraded_authors=list(orchestrator.degraded_authors),
            error_stats=self.error_handler.get_stats(),
            output_path=output_path,
        )

    def run(self, write: bool = True) -> ReportResult:
        """generate() の同期ラッパー"""
        return asyncio.run(self.generate(write=write))

    # ========== Internal ==========

    async def _author_stats(self, groups: AuthorGroup) -> dict[str, int] | None:
        scope = self.config.stats_scope
        if scope is StatsScope.NONE:
            return None
        if scope is StatsScope.HISTORY:
            return await self.source.count_authors(self.config.repository)
        return count_by_author(groups)

    @staticmethod
    def _write(report: str, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report, encoding="utf-8")
        logger.info("Report saved to %s", path)
        return path


def create_commy(
    config: str | Path | dict[str, Any] | CommyConfig | None = None,
) -> Commy:
    """Commyインスタンスを作成するファクトリ関数"""
    return Commy(config)
