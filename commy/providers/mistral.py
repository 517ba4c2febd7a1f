# Mistral Adapter
"""
Mistral AI chat completions adapter.

Authentication: ``Authorization: Bearer <key>``.
"""

from __future__ import annotations

from typing import Any

from commy.providers.base import ProviderAdapter


class MistralAdapter(ProviderAdapter):
    """Mistral AI アダプター"""

    provider_id = "mistral"
    display_name = "Mistral AI"
    default_model = "mistral-small-latest"

    BASE_URL = "https://api.mistral.ai/v1/chat/completions"

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
        }

    def extract_text(self, data: dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]
