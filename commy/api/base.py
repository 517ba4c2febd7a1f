# Commy API Base Types
"""
commy.api.base - Python API 基本型定義
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from commy.commits.models import RepositoryInfo


class StatsScope(Enum):
    """貢献者統計の範囲"""

    WINDOW = "window"  # 対象期間のコミットのみ
    HISTORY = "history"  # 全履歴
    NONE = "none"  # 貢献者セクションなし


@dataclass
class CommyConfig:
    """Commy設定"""

    # リポジトリ設定
    repository: Path = field(default_factory=lambda: Path("."))
    days: int = 7
    author: str | None = None

    # プロバイダー設定
    provider: str = "mistral"
    api_key: str | None = None
    model: str | None = None
    language: str = "fr"
    timeout: float | None = 60.0

    # 出力設定
    date_format: str = "%d/%m/%Y"
    output_path: Path = field(default_factory=lambda: Path("tasks.md"))
    stats_scope: StatsScope = StatsScope.WINDOW

    def __post_init__(self):
        """型変換"""
        if isinstance(self.repository, str):
            self.repository = Path(self.repository)
        if isinstance(self.output_path, str):
            self.output_path = Path(self.output_path)
        if isinstance(self.stats_scope, str):
            self.stats_scope = StatsScope(self.stats_scope)


@dataclass
class ReportResult:
    """レポート生成結果"""

    report: str
    commit_count: int = 0
    author_count: int = 0
    provider: str = ""
    repository_info: RepositoryInfo = field(default_factory=RepositoryInfo)

    # フォールバックになった著者
    degraded_authors: list[str] = field(default_factory=list)

    # 回復したエラーの種類別件数（ErrorHandler.get_stats）
    error_stats: dict[str, Any] = field(default_factory=dict)

    output_path: Path | None = None

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_authors)
