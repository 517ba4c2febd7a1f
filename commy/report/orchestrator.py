# Reformulation Orchestrator
"""
commy.report.orchestrator - 著者ごとの再構成ループ

著者は初出順に1人ずつ順番に処理する（同時実行は1リクエストのみ）。
1人の失敗は他の著者に影響せず、生のコミット行によるフォールバックに
置き換えられる。設定エラーは作業開始前に送出される。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from commy.commits.models import AuthorGroup, Commit
from commy.errors import ConfigurationError, ErrorHandler, get_error_handler
from commy.providers.registry import ProviderId, ProviderRegistry

logger = logging.getLogger(__name__)


def fallback_text(commits: Sequence[Commit]) -> str:
    """再構成に失敗した著者用の ``- <message>`` 行"""
    return "\n".join(f"- {commit.message}" for commit in commits)


class ReformulationOrchestrator:
    """再構成オーケストレーター

    Example:
        >>> orchestrator = ReformulationOrchestrator(timeout=30.0)
        >>> tasks = await orchestrator.run(groups, "mistral", api_key)
        >>> orchestrator.degraded_authors
        []

    Attributes:
        registry: プロバイダーレジストリ
        error_handler: 回復したエラーの記録先
        degraded_authors: 直近の実行でフォールバックになった著者
    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        error_handler: ErrorHandler | None = None,
        **adapter_options: Any,
    ) -> None:
        self.registry = registry or ProviderRegistry()
        self.error_handler = error_handler or get_error_handler()
        self.adapter_options = adapter_options
        self.degraded_authors: list[str] = []

    async def run(
        self,
        author_groups: AuthorGroup,
        provider_id: str | ProviderId,
        credential: str | None,
    ) -> dict[str, str]:
        """全著者のコミットを再構成

        Args:
            author_groups: 著者 → コミット
            provider_id: プロバイダーIDまたは別名
            credential: APIキー

        Returns:
            著者 → タスク記述（入力と同じキー・同じ順序）

        Raises:
            UnsupportedProviderError: プロバイダーが未知の場合
            ConfigurationError: APIキーが未設定の場合
        """
        descriptor = self.registry.resolve(provider_id)
        if not credential:
            raise ConfigurationError(
                f"{descriptor.credential_env_var} is not set",
                component="orchestrator",
                provider=descriptor.id.value,
            )

        self.degraded_authors = []
        author_tasks: dict[str, str] = {}
        if not author_groups:
            return author_tasks

        adapter = self.registry.instantiate(descriptor.id, credential, **self.adapter_options)
        async with adapter:
            for author, commits in author_groups.items():
                logger.info("Reformulating %d commits for %s...", len(commits), author)
                try:
                    author_tasks[author] = await adapter.reformulate(commits, author)
                except ConfigurationError:
                    raise
                except Exception as e:
                    self.error_handler.handle(
                        e,
                        component="orchestrator",
                        operation="reformulate",
                        reraise=False,
                        author=author,
                    )
                    author_tasks[author] = fallback_text(commits)
                    self.degraded_authors.append(author)

        if self.degraded_authors:
            logger.warning(
                "Raw fallback used for %d of %d authors",
                len(self.degraded_authors),
                len(author_tasks),
            )
        return author_tasks
