# OpenAI Adapter
"""
OpenAI chat completions adapter.

Authentication: ``Authorization: Bearer <key>``.
"""

from __future__ import annotations

from typing import Any

from commy.providers.base import ProviderAdapter


class OpenAIAdapter(ProviderAdapter):
    """OpenAI (ChatGPT) アダプター"""

    provider_id = "openai"
    display_name = "OpenAI (ChatGPT)"
    default_model = "gpt-3.5-turbo"

    BASE_URL = "https://api.openai.com/v1/chat/completions"

    def endpoint(self) -> str:
        return self.BASE_URL

    def headers(self) -> dict[str, str]:
        return {
            **super().headers(),
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
        }

    def extract_text(self, data: dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]
