# Providers Module
"""
Text-generation provider adapters.

Provides one capability, ``reformulate(commits, author)``, over:
- Mistral AI
- OpenAI (ChatGPT)
- Google Gemini
- Anthropic Claude
"""

from commy.providers.base import ProviderAdapter
from commy.providers.claude import ClaudeAdapter
from commy.providers.gemini import GeminiAdapter
from commy.providers.mistral import MistralAdapter
from commy.providers.openai import OpenAIAdapter
from commy.providers.registry import ProviderDescriptor, ProviderId, ProviderRegistry

__all__ = [
    "ProviderAdapter",
    "ClaudeAdapter",
    "GeminiAdapter",
    "MistralAdapter",
    "OpenAIAdapter",
    "ProviderDescriptor",
    "ProviderId",
    "ProviderRegistry",
]
