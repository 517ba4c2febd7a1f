# Gemini Adapter
"""
Google Gemini generateContent adapter.

The API key travels as the ``key`` query parameter; no auth header is sent.
"""

from __future__ import annotations

from typing import Any

from commy.providers.base import ProviderAdapter


class GeminiAdapter(ProviderAdapter):
    """Google Gemini アダプター"""

    provider_id = "gemini"
    display_name = "Google Gemini"
    default_model = "gemini-pro"

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def endpoint(self) -> str:
        return f"{self.BASE_URL}/{self.model}:generateContent"

    def params(self) -> dict[str, str]:
        return {"key": self.api_key or ""}

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.TEMPERATURE,
                "maxOutputTokens": self.MAX_TOKENS,
            },
        }

    def extract_text(self, data: dict[str, Any]) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]
