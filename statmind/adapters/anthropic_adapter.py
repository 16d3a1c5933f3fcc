"""
Anthropic Messages API adapter for analyst-style reasoning text.
"""

import requests
from typing import Optional

from statmind.adapters.base import ReasoningProvider, ProviderRegistry
from statmind.errors import ProviderError
from statmind.app_logging import get_logger

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(ReasoningProvider):
    """Calls the Messages API over HTTP with a hard timeout."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 500,
        temperature: float = 0.7,
        base_url: str = "https://api.anthropic.com/v1/messages",
    ):
        super().__init__(api_key, timeout)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.base_url = base_url

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ProviderError("No API key configured", provider=self.provider_name)

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = requests.post(self.base_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderError(f"Request timed out after {self.timeout}s", provider=self.provider_name) from e
        except requests.RequestException as e:
            raise ProviderError(f"Request failed: {e}", provider=self.provider_name) from e

        if response.status_code != 200:
            # 429 = rate limited, 529 = overloaded
            raise ProviderError(
                f"Provider returned HTTP {response.status_code}",
                provider=self.provider_name,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            blocks = data.get("content", [])
            text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text").strip()
        except (ValueError, AttributeError, TypeError) as e:
            raise ProviderError(f"Malformed response body: {e}", provider=self.provider_name) from e

        if not text:
            raise ProviderError("Provider returned empty text", provider=self.provider_name)

        logger.debug(f"Generated {len(text)} chars with {self.model}")
        return text


ProviderRegistry.register("anthropic", AnthropicAdapter)
