# Commits Module
"""
Commit extraction and grouping.

- GitCommitSource: git CLI boundary
- group_by_author / filter_by_author / count_by_author: pure aggregation
"""

from commy.commits.aggregator import count_by_author, filter_by_author, group_by_author
from commy.commits.models import UNAVAILABLE, AuthorGroup, Commit, RepositoryInfo
from commy.commits.source import GitCommitSource

__all__ = [
    "UNAVAILABLE",
    "AuthorGroup",
    "Commit",
    "RepositoryInfo",
    "GitCommitSource",
    "count_by_author",
    "filter_by_author",
    "group_by_author",
]
