"""
Commy - Git activity reports rewritten by a text-generation provider.

Extracts commits from a git repository, groups them by author, rewrites each
author's commits into concise tasks through Mistral, OpenAI, Gemini or Claude,
and assembles a Markdown report.
"""

from commy.api import Commy, CommyConfig, ReportResult, StatsScope, create_commy
from commy.commits import (
    Commit,
    GitCommitSource,
    RepositoryInfo,
    count_by_author,
    filter_by_author,
    group_by_author,
)
from commy.errors import (
    CommyError,
    ConfigError,
    ConfigurationError,
    ProviderError,
    RepositoryError,
    UnsupportedProviderError,
)
from commy.providers import ProviderAdapter, ProviderDescriptor, ProviderId, ProviderRegistry
from commy.report import ReformulationOrchestrator, ReportAssembler

__all__ = [
    # Facade
    "Commy",
    "CommyConfig",
    "ReportResult",
    "StatsScope",
    "create_commy",
    # Commits
    "Commit",
    "GitCommitSource",
    "RepositoryInfo",
    "count_by_author",
    "filter_by_author",
    "group_by_author",
    # Providers
    "ProviderAdapter",
    "ProviderDescriptor",
    "ProviderId",
    "ProviderRegistry",
    # Report
    "ReformulationOrchestrator",
    "ReportAssembler",
    # Errors
    "CommyError",
    "ConfigError",
    "ConfigurationError",
    "ProviderError",
    "RepositoryError",
    "UnsupportedProviderError",
]

__version__ = "1.0.0"
