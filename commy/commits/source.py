# Git Commit Source
"""
commy.commits.source - gitコマンドからのコミット取得

git CLI を非同期サブプロセスとして実行し、1行1コミットの
``<hash>|<author>|<email>|<YYYY-MM-DD>|<subject>`` 形式を解析する。

件名 (%s) は git により1行に畳まれるため、改行は含まれない。
各行は先頭4つの ``|`` でのみ分割するので、メッセージ中の ``|`` は
そのまま保持される。著者名やメールに ``|`` が含まれると日付欄が
ずれるため、日付欄が YYYY-MM-DD でない行は警告を出してスキップする。

コミットがまだない作業ツリー（``git init`` 直後）は空の履歴として扱う。
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path

from commy.commits.models import UNAVAILABLE, Commit, RepositoryInfo
from commy.errors import RepositoryError

logger = logging.getLogger(__name__)


class GitCommitSource:
    """gitリポジトリからコミットを取得する

    Example:
        >>> source = GitCommitSource()
        >>> if await source.validate("."):
        ...     commits = await source.fetch_since(".", date(2024, 6, 1))

    Attributes:
        git_binary: gitの実行ファイル
        date_format: Commit.date に使う strftime 形式
    """

    LOG_FORMAT = "%H|%an|%ae|%ad|%s"
    FIELD_COUNT = 5

    def __init__(
        self,
        git_binary: str = "git",
        date_format: str = "%d/%m/%Y",
    ) -> None:
        self.git_binary = git_binary
        self.date_format = date_format

    # ========== Public API ==========

    async def fetch_since(
        self,
        repository: str | Path,
        since: date | datetime,
    ) -> list[Commit]:
        """指定日以降のコミットを取得（指定日を含む）

        Args:
            repository: リポジトリのパス
            since: 基準日

        Returns:
            古い順のコミットリスト

        Raises:
            RepositoryError: リポジトリが無効、またはgitが失敗した場合
        """
        self._ensure_directory(repository)

        cutoff = since.strftime("%Y-%m-%d")
        if await self._is_unborn(repository):
            logger.info("Repository %s has no commits yet", repository)
            return []

        # 時刻を省略すると git は現在時刻を補うため、00:00 を明示する
        output = await self._git(
            repository,
            "log",
            f"--since={cutoff} 00:00:00",
            "--reverse",
            "--date=short",
            f"--pretty=format:{self.LOG_FORMAT}",
        )

        commits = self.parse_log(output)
        logger.info("Fetched %d commits since %s from %s", len(commits), cutoff, repository)
        return commits

    async def validate(self, repository: str | Path) -> bool:
        """Gitの作業ツリーかどうか（例外は送出しない）"""
        try:
            code, stdout, _ = await self._run(
                repository, "rev-parse", "--is-inside-work-tree"
            )
        except OSError as e:
            logger.debug("git rev-parse failed for %s: %s", repository, e)
            return False
        return code == 0 and stdout.strip() == "true"

    async def describe(self, repository: str | Path) -> RepositoryInfo:
        """リモートURLと現在のブランチを取得

        取得できない項目は UNAVAILABLE になる。例外は送出しない。
        """
        remote_url = await self._read_value(
            repository, "config", "--get", "remote.origin.url"
        )
        current_branch = await self._read_value(repository, "branch", "--show-current")
        return RepositoryInfo(remote_url=remote_url, current_branch=current_branch)

    async def count_authors(self, repository: str | Path) -> dict[str, int]:
        """全履歴の著者別コミット数（初出順）

        Raises:
            RepositoryError: gitが失敗した場合
        """
        self._ensure_directory(repository)
        if await self._is_unborn(repository):
            return {}

        output = await self._git(repository, "log", "--reverse", "--pretty=format:%an")
        counts: dict[str, int] = {}
        for line in output.splitlines():
            if line:
                counts[line] = counts.get(line, 0) + 1
        return counts

    # ========== Parsing ==========

    def parse_log(self, output: str) -> list[Commit]:
        """git log の出力をCommitのリストに変換"""
        if not output.strip():
            return []

        commits: list[Commit] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            fields = line.split("|", self.FIELD_COUNT - 1)
            if len(fields) < self.FIELD_COUNT:
                logger.warning("Skipping malformed log record: %r", line)
                continue
            commit_hash, author, email, raw_date, message = fields
            if not self._is_log_date(raw_date):
                logger.warning("Skipping log record with shifted fields: %r", line)
                continue
            commits.append(
                Commit(
                    hash=commit_hash,
                    author=author,
                    email=email,
                    date=self.format_date(raw_date),
                    message=message,
                )
            )
        return commits

    def format_date(self, raw: str) -> str:
        """YYYY-MM-DD を表示形式に変換（解析できなければそのまま）"""
        try:
            return datetime.strptime(raw.strip(), "%Y-%m-%d").strftime(self.date_format)
        except ValueError:
            return raw

    # ========== Internal ==========

    @staticmethod
    def _is_log_date(raw: str) -> bool:
        try:
            datetime.strptime(raw, "%Y-%m-%d")
        except ValueError:
            return False
        return True

    async def _is_unborn(self, repository: str | Path) -> bool:
        """作業ツリーだが HEAD がまだ存在しない"""
        try:
            code, _, _ = await self._run(repository, "rev-parse", "--verify", "-q", "HEAD")
        except OSError:
            # git 自体の失敗は後続の _git で RepositoryError になる
            return False
        if code == 0:
            return False
        return await self.validate(repository)

    def _ensure_directory(self, repository: str | Path) -> None:
        if not Path(repository).is_dir():
            raise RepositoryError(
                f"Repository path not found: {repository}",
                repository=str(repository),
                component="commit_source",
            )

    async def _run(self, repository: str | Path, *args: str) -> tuple[int, str, str]:
        """gitを実行して (returncode, stdout, stderr) を返す"""
        process = await asyncio.create_subprocess_exec(
            self.git_binary,
            "-C",
            str(repository),
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        return (
            process.returncode if process.returncode is not None else -1,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def _git(self, repository: str | Path, *args: str) -> str:
        """gitを実行し、失敗時は RepositoryError を送出"""
        operation = f"git {args[0]}" if args else "git"
        try:
            code, stdout, stderr = await self._run(repository, *args)
        except OSError as e:
            raise RepositoryError(
                f"Unable to run git: {e}",
                repository=str(repository),
                cause=e,
                component="commit_source",
                operation=operation,
            ) from e

        if code != 0:
            raise RepositoryError(
                f"git exited with status {code}: {stderr.strip()}",
                repository=str(repository),
                returncode=code,
                stderr=stderr,
                component="commit_source",
                operation=operation,
            )
        return stdout

    async def _read_value(self, repository: str | Path, *args: str) -> str:
        try:
            code, stdout, _ = await self._run(repository, *args)
        except OSError as e:
            logger.debug("git %s failed for %s: %s", args[0], repository, e)
            return UNAVAILABLE
        value = stdout.strip()
        if code != 0 or not value:
            return UNAVAILABLE
        return value
