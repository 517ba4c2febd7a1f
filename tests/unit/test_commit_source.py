# Git Commit Source Tests
"""
GitCommitSource のテスト

- _run をモックした単体テスト
- 一時リポジトリに対して git CLI を実行する統合テスト
"""

import logging
import os
import shutil
import subprocess
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from commy.commits import UNAVAILABLE, GitCommitSource
from commy.errors import RepositoryError


# ========== Parsing ==========


class TestParseLog:
    """parse_log のテスト"""

    def test_parse_records(self):
        """1行1コミット"""
        source = GitCommitSource()
        output = (
            "aaa|Alice|alice@example.com|2024-06-01|fix bug\n"
            "bbb|Bob|bob@example.com|2024-06-02|update docs"
        )

        commits = source.parse_log(output)

        assert len(commits) == 2
        assert commits[0].hash == "aaa"
        assert commits[0].author == "Alice"
        assert commits[0].email == "alice@example.com"
        assert commits[0].date == "01/06/2024"
        assert commits[0].message == "fix bug"
        assert commits[1].date == "02/06/2024"

    def test_pipe_in_message_preserved(self):
        """メッセージ中の | は保持される"""
        source = GitCommitSource()

        commits = source.parse_log("aaa|Alice|a@x.io|2024-06-01|feat: a | b | c")

        assert commits[0].message == "feat: a | b | c"

    def test_empty_output(self):
        """空出力は空リスト"""
        assert GitCommitSource().parse_log("") == []
        assert GitCommitSource().parse_log("\n  \n") == []

    def test_malformed_line_skipped(self):
        """フィールド不足の行はスキップ"""
        source = GitCommitSource()
        output = "garbage line\naaa|Alice|a@x.io|2024-06-01|ok"

        commits = source.parse_log(output)

        assert [c.message for c in commits] == ["ok"]

    def test_pipe_in_author_skipped_with_warning(self, caplog):
        """著者名の | で日付欄がずれた行は警告してスキップ"""
        source = GitCommitSource()
        output = (
            "aaa|Ali|ce|alice@example.com|2024-06-01|fix bug\n"
            "bbb|Bob|bob@example.com|2024-06-02|update docs"
        )

        with caplog.at_level(logging.WARNING, logger="commy.commits.source"):
            commits = source.parse_log(output)

        assert [c.author for c in commits] == ["Bob"]
        assert "Ali|ce" in caplog.text

    def test_empty_message(self):
        """空メッセージも1件として扱う"""
        commits = GitCommitSource().parse_log("aaa|Alice|a@x.io|2024-06-01|")

        assert commits[0].message == ""


class TestFormatDate:
    """format_date のテスト"""

    def test_default_format(self):
        assert GitCommitSource().format_date("2024-06-01") == "01/06/2024"

    def test_custom_format(self):
        source = GitCommitSource(date_format="%Y/%m/%d")

        assert source.format_date("2024-06-01") == "2024/06/01"

    def test_unparsable_kept(self):
        assert GitCommitSource().format_date("yesterday") == "yesterday"


# ========== Mocked git ==========


class TestFetchSinceMocked:
    """fetch_since（_runモック）"""

    @pytest.mark.asyncio
    async def test_command_arguments(self, tmp_path):
        """git log の引数"""
        source = GitCommitSource()
        run = AsyncMock(return_value=(0, "aaa|Alice|a@x.io|2024-06-01|fix", ""))

        with patch.object(source, "_run", run):
            commits = await source.fetch_since(tmp_path, date(2024, 5, 27))

        assert len(commits) == 1
        args = run.call_args.args
        assert args[0] == tmp_path
        assert "log" in args
        assert "--since=2024-05-27 00:00:00" in args
        assert "--reverse" in args
        assert "--date=short" in args
        assert "--pretty=format:%H|%an|%ae|%ad|%s" in args

    @pytest.mark.asyncio
    async def test_unborn_head_is_empty(self, tmp_path):
        """HEADのない作業ツリーは git log を実行せず空リスト"""
        source = GitCommitSource()
        run = AsyncMock(side_effect=[(128, "", ""), (0, "true\n", "")])

        with patch.object(source, "_run", run):
            commits = await source.fetch_since(tmp_path, date(2024, 6, 1))

        assert commits == []
        assert run.call_count == 2
        assert run.call_args_list[0].args[1:] == ("rev-parse", "--verify", "-q", "HEAD")

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self, tmp_path):
        """gitの失敗は RepositoryError"""
        source = GitCommitSource()
        run = AsyncMock(return_value=(128, "", "fatal: not a git repository"))

        with patch.object(source, "_run", run):
            with pytest.raises(RepositoryError) as exc_info:
                await source.fetch_since(tmp_path, date(2024, 6, 1))

        assert exc_info.value.returncode == 128
        assert "not a git repository" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_git_binary_raises(self, tmp_path):
        """gitが見つからない場合も RepositoryError"""
        source = GitCommitSource()
        run = AsyncMock(side_effect=FileNotFoundError("git"))

        with patch.object(source, "_run", run):
            with pytest.raises(RepositoryError):
                await source.fetch_since(tmp_path, date(2024, 6, 1))

    @pytest.mark.asyncio
    async def test_missing_directory_raises(self, tmp_path):
        """存在しないパス"""
        source = GitCommitSource()

        with pytest.raises(RepositoryError):
            await source.fetch_since(tmp_path / "missing", date(2024, 6, 1))


class TestValidateDescribeMocked:
    """validate / describe（_runモック）"""

    @pytest.mark.asyncio
    async def test_validate_true(self, tmp_path):
        source = GitCommitSource()

        with patch.object(source, "_run", AsyncMock(return_value=(0, "true\n", ""))):
            assert await source.validate(tmp_path) is True

    @pytest.mark.asyncio
    async def test_validate_nonzero(self, tmp_path):
        source = GitCommitSource()

        with patch.object(source, "_run", AsyncMock(return_value=(128, "", "fatal"))):
            assert await source.validate(tmp_path) is False

    @pytest.mark.asyncio
    async def test_validate_never_raises(self, tmp_path):
        """OSError は False に畳まれる"""
        source = GitCommitSource()

        with patch.object(source, "_run", AsyncMock(side_effect=OSError("boom"))):
            assert await source.validate(tmp_path) is False

    @pytest.mark.asyncio
    async def test_describe_values(self, tmp_path):
        source = GitCommitSource()
        run = AsyncMock(side_effect=[
            (0, "git@example.com:team/project.git\n", ""),
            (0, "main\n", ""),
        ])

        with patch.object(source, "_run", run):
            info = await source.describe(tmp_path)

        assert info.remote_url == "git@example.com:team/project.git"
        assert info.current_branch == "main"
        assert info.is_available

    @pytest.mark.asyncio
    async def test_describe_sentinel_on_failure(self, tmp_path):
        """失敗した項目は UNAVAILABLE"""
        source = GitCommitSource()
        run = AsyncMock(side_effect=[(1, "", ""), OSError("boom")])

        with patch.object(source, "_run", run):
            info = await source.describe(tmp_path)

        assert info.remote_url == UNAVAILABLE
        assert info.current_branch == UNAVAILABLE
        assert not info.is_available

    @pytest.mark.asyncio
    async def test_count_authors(self, tmp_path):
        source = GitCommitSource()
        run = AsyncMock(return_value=(0, "Alice\nBob\nAlice\n", ""))

        with patch.object(source, "_run", run):
            counts = await source.count_authors(tmp_path)

        assert counts == {"Alice": 2, "Bob": 1}
        assert list(counts) == ["Alice", "Bob"]


# ========== Integration with the git CLI ==========


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo, *args, env=None):
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, env=env)


def _commit(repo, author, message, when):
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": author,
        "GIT_AUTHOR_EMAIL": f"{author.lower()}@example.com",
        "GIT_COMMITTER_NAME": author,
        "GIT_COMMITTER_EMAIL": f"{author.lower()}@example.com",
        "GIT_AUTHOR_DATE": when,
        "GIT_COMMITTER_DATE": when,
    }
    _git(repo, "commit", "--allow-empty", "-m", message, env=env)


@pytest.fixture
def git_repo(tmp_path):
    """コミット済みの一時リポジトリ"""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "commit.gpgsign", "false")
    _commit(repo, "Alice", "initial import", "2024-05-20T10:00:00")
    _commit(repo, "Alice", "fix bug", "2024-06-01T10:00:00")
    _commit(repo, "Bob", "update docs | readme", "2024-06-01T11:00:00")
    _commit(repo, "Alice", "add test", "2024-06-02T09:00:00")
    return repo


@requires_git
@pytest.mark.integration
class TestGitIntegration:
    """実際の git CLI を使う統合テスト"""

    @pytest.mark.asyncio
    async def test_validate(self, git_repo, tmp_path):
        source = GitCommitSource()
        plain = tmp_path / "plain"
        plain.mkdir()

        assert await source.validate(git_repo) is True
        assert await source.validate(plain) is False
        assert await source.validate(tmp_path / "missing") is False

    @pytest.mark.asyncio
    async def test_fetch_since_oldest_first(self, git_repo):
        """基準日を含み、古い順"""
        source = GitCommitSource()

        commits = await source.fetch_since(git_repo, date(2024, 6, 1))

        assert [c.message for c in commits] == ["fix bug", "update docs | readme", "add test"]
        assert [c.author for c in commits] == ["Alice", "Bob", "Alice"]
        assert commits[0].date == "01/06/2024"
        assert commits[0].email == "alice@example.com"
        assert len(commits[0].hash) == 40

    @pytest.mark.asyncio
    async def test_fetch_since_future_is_empty(self, git_repo):
        source = GitCommitSource()

        assert await source.fetch_since(git_repo, date(2030, 1, 1)) == []

    @pytest.mark.asyncio
    async def test_fetch_since_not_a_repository(self, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(RepositoryError):
            await GitCommitSource().fetch_since(plain, date(2024, 6, 1))

    @pytest.mark.asyncio
    async def test_describe_without_remote(self, git_repo):
        info = await GitCommitSource().describe(git_repo)

        assert info.remote_url == UNAVAILABLE
        assert info.current_branch == "main"

    @pytest.mark.asyncio
    async def test_count_authors_whole_history(self, git_repo):
        counts = await GitCommitSource().count_authors(git_repo)

        assert counts == {"Alice": 3, "Bob": 1}

    @pytest.mark.asyncio
    async def test_repository_without_commits(self, tmp_path):
        """git init 直後のリポジトリは空の履歴"""
        repo = tmp_path / "fresh"
        repo.mkdir()
        _git(repo, "init", "-q")
        source = GitCommitSource()

        assert await source.validate(repo) is True
        assert await source.fetch_since(repo, date(2024, 1, 1)) == []
        assert await source.count_authors(repo) == {}
