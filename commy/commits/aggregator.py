# Commit Aggregator
"""
commy.commits.aggregator - コミットの著者別集約

著者名は文字列そのものをキーとする。大文字小文字や空白の違いは
別の著者として扱う。
"""

from __future__ import annotations

from collections.abc import Iterable

from commy.commits.models import AuthorGroup, Commit


def filter_by_author(commits: Iterable[Commit], needle: str | None) -> list[Commit]:
    """著者名の部分一致（大文字小文字を区別しない）でフィルタ

    Args:
        commits: コミット列
        needle: 検索文字列（空またはNoneの場合は全件を返す）

    Returns:
        元の順序を保ったコミットのリスト
    """
    if not needle:
        return list(commits)

    lowered = needle.lower()
    return [commit for commit in commits if lowered in commit.author.lower()]


def group_by_author(commits: Iterable[Commit]) -> AuthorGroup:
    """コミットを著者ごとにグループ化

    著者の並びは初出順、各グループ内のコミットは元の相対順を保つ。

    Args:
        commits: コミット列

    Returns:
        著者名 → コミットリスト
    """
    groups: AuthorGroup = {}
    for commit in commits:
        groups.setdefault(commit.author, []).append(commit)
    return groups


def count_by_author(groups: AuthorGroup) -> dict[str, int]:
    """著者ごとのコミット数"""
    return {author: len(commits) for author, commits in groups.items()}
