# Provider Registry
"""
commy.providers.registry - プロバイダーの解決と生成

プロバイダーIDは境界で一度だけ ProviderId に検証され、以降は
列挙値として扱う。認証情報は引数として明示的に渡される。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from commy.errors import UnsupportedProviderError
from commy.providers.base import ProviderAdapter
from commy.providers.claude import ClaudeAdapter
from commy.providers.gemini import GeminiAdapter
from commy.providers.mistral import MistralAdapter
from commy.providers.openai import OpenAIAdapter


class ProviderId(Enum):
    """対応プロバイダー"""

    MISTRAL = "mistral"
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"


@dataclass(frozen=True)
class ProviderDescriptor:
    """プロバイダー記述子

    Attributes:
        id: プロバイダーID
        display_name: 表示名
        credential_env_var: APIキーを保持する環境変数名
        aliases: 別名
    """

    id: ProviderId
    display_name: str
    credential_env_var: str
    aliases: tuple[str, ...] = field(default_factory=tuple)


_DESCRIPTORS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(ProviderId.MISTRAL, "Mistral AI", "MISTRAL_API_KEY"),
    ProviderDescriptor(ProviderId.OPENAI, "OpenAI (ChatGPT)", "OPENAI_API_KEY", ("chatgpt",)),
    ProviderDescriptor(ProviderId.GEMINI, "Google Gemini", "GEMINI_API_KEY", ("google",)),
    ProviderDescriptor(ProviderId.CLAUDE, "Anthropic Claude", "CLAUDE_API_KEY", ("anthropic",)),
)

_ADAPTERS: dict[ProviderId, type[ProviderAdapter]] = {
    ProviderId.MISTRAL: MistralAdapter,
    ProviderId.OPENAI: OpenAIAdapter,
    ProviderId.GEMINI: GeminiAdapter,
    ProviderId.CLAUDE: ClaudeAdapter,
}


class ProviderRegistry:
    """プロバイダーレジストリ

    Example:
        >>> registry = ProviderRegistry()
        >>> registry.resolve("ChatGPT").id
        <ProviderId.OPENAI: 'openai'>
        >>> adapter = registry.instantiate("claude", "sk-...")
    """

    def __init__(
        self,
        descriptors: tuple[ProviderDescriptor, ...] = _DESCRIPTORS,
        adapters: Mapping[ProviderId, type[ProviderAdapter]] | None = None,
    ) -> None:
        self._descriptors = descriptors
        self._adapters = dict(adapters or _ADAPTERS)
        self._lookup: dict[str, ProviderDescriptor] = {}
        for descriptor in descriptors:
            self._lookup[descriptor.id.value] = descriptor
            for alias in descriptor.aliases:
                self._lookup[alias.lower()] = descriptor

    def list_supported(self) -> list[ProviderDescriptor]:
        """対応プロバイダー一覧"""
        return list(self._descriptors)

    def supported_ids(self) -> list[str]:
        return [descriptor.id.value for descriptor in self._descriptors]

    def resolve(self, provider_id: str | ProviderId) -> ProviderDescriptor:
        """IDまたは別名から記述子を取得（大文字小文字を区別しない）

        Raises:
            UnsupportedProviderError: 未知のIDの場合
        """
        key = provider_id.value if isinstance(provider_id, ProviderId) else str(provider_id)
        descriptor = self._lookup.get(key.strip().lower())
        if descriptor is None:
            raise UnsupportedProviderError(
                str(provider_id),
                self.supported_ids(),
                component="provider_registry",
            )
        return descriptor

    def instantiate(
        self,
        provider_id: str | ProviderId,
        credential: str | None,
        **options: Any,
    ) -> ProviderAdapter:
        """アダプターを生成

        Args:
            provider_id: プロバイダーIDまたは別名
            credential: APIキー
            **options: model, timeout, language

        Returns:
            ProviderAdapter
        """
        descriptor = self.resolve(provider_id)
        adapter_cls = self._adapters[descriptor.id]
        return adapter_cls(credential, **options)

    def credential_from_env(
        self,
        provider_id: str | ProviderId,
        environ: Mapping[str, str] | None = None,
    ) -> str | None:
        """記述子の環境変数からAPIキーを読む（未設定ならNone）"""
        descriptor = self.resolve(provider_id)
        env = os.environ if environ is None else environ
        return env.get(descriptor.credential_env_var) or None
