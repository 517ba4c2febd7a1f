# Commit Models
"""
commy.commits.models - コミット関連のデータ型
"""

from __future__ import annotations

from dataclasses import dataclass

# 取得できなかったリポジトリ情報に使う値
UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Commit:
    """単一コミット

    Attributes:
        hash: コミットハッシュ
        author: 著者名（正規化しない）
        email: 著者メールアドレス
        date: 表示用にフォーマット済みの日付
        message: コミットの件名
    """

    hash: str
    author: str
    email: str
    date: str
    message: str


# 著者名 → コミット列（挿入順 = 初出順）
AuthorGroup = dict[str, list[Commit]]


@dataclass(frozen=True)
class RepositoryInfo:
    """リポジトリ情報（表示用、ベストエフォート）"""

    remote_url: str = UNAVAILABLE
    current_branch: str = UNAVAILABLE

    @property
    def is_available(self) -> bool:
        return UNAVAILABLE not in (self.remote_url, self.current_branch)
