# Claude Adapter
"""
Anthropic Messages API adapter.

Authentication: ``x-api-key`` header plus a pinned ``anthropic-version``.
"""

from __future__ import annotations

from typing import Any

from commy.providers.base import ProviderAdapter


class ClaudeAdapter(ProviderAdapter):
    """Anthropic Claude アダプター"""

    provider_id = "claude"
    display_name = "Anthropic Claude"
    default_model = "claude-3-haiku-20240307"

    BASE_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"

    def endpoint(self) -> str:
        return self.BASE_URL

    def headers(self) -> dict[str, str]:
        return {
            **super().headers(),
            "x-api-key": self.api_key or "",
            "anthropic-version": self.API_VERSION,
        }

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.TEMPERATURE,
        }

    def extract_text(self, data: dict[str, Any]) -> str:
        return data["content"][0]["text"]
