# Report Assembler
"""
commy.report.assembler - Markdownレポートの組み立て

入力が不正でも例外は送出せず、有効なセクションだけを出力する。
時計を固定すれば同じ入力から同じ文字列が得られる。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


class ReportAssembler:
    """レポート組み立て

    Example:
        >>> assembler = ReportAssembler(clock=lambda: datetime(2024, 6, 3))
        >>> print(assembler.build({"Alice": "- fix bug"}, {"Alice": 1}))
        # Rapport d'activité Git
        ...
    """

    TITLE = "# Rapport d'activité Git"
    GENERATED_LABEL = "Généré le"
    CONTRIBUTORS_HEADING = "## Contributeurs"
    ACTIVITIES_HEADING = "## Activités par contributeur"

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        date_format: str = "%d/%m/%Y",
    ) -> None:
        self.clock = clock or datetime.now
        self.date_format = date_format

    def build(
        self,
        author_tasks: Mapping[str, str],
        author_stats: Mapping[str, int] | None = None,
    ) -> str:
        """レポートを生成

        Args:
            author_tasks: 著者 → タスク記述
            author_stats: 著者 → コミット数（省略時は貢献者セクションなし）

        Returns:
            Markdown文字列
        """
        report = f"{self.TITLE}\n\n{self.GENERATED_LABEL}: {self._today()}\n\n"

        contributors = self._valid_entries(author_stats, int, "stats")
        if contributors:
            report += f"{self.CONTRIBUTORS_HEADING}\n\n"
            for author, count in contributors:
                report += f"- {author}: {count} commits\n"
            report += "\n"

        sections = self._valid_entries(author_tasks, str, "tasks")
        if sections:
            report += f"{self.ACTIVITIES_HEADING}\n\n"
            for author, tasks in sections:
                report += f"### {author}\n\n{tasks}\n\n"

        return report

    def _today(self) -> str:
        try:
            return self.clock().strftime(self.date_format)
        except Exception as e:
            logger.warning("Report clock failed, using current date: %s", e)
            return datetime.now().strftime("%d/%m/%Y")

    @staticmethod
    def _valid_entries(
        data: Any,
        value_type: type,
        label: str,
    ) -> list[tuple[str, Any]]:
        """著者名が空でない文字列で、値の型が正しいエントリのみ返す"""
        if data is None:
            return []
        if not isinstance(data, Mapping):
            logger.warning("Ignoring %s: expected a mapping, got %s", label, type(data).__name__)
            return []

        entries: list[tuple[str, Any]] = []
        for author, value in data.items():
            # bool は int のサブクラスなので除外
            valid_value = isinstance(value, value_type) and not isinstance(value, bool)
            if isinstance(author, str) and author and valid_value:
                entries.append((author, value))
            else:
                logger.warning("Skipping invalid %s entry for %r", label, author)
        return entries
