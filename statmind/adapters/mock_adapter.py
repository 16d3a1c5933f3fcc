"""Mock reasoning provider for development."""
import hashlib
from typing import Optional

from statmind.adapters.base import ReasoningProvider, ProviderRegistry
from statmind.errors import ProviderError


class MockAdapter(ReasoningProvider):
    """Offline provider that answers deterministically from the prompt.

    Set `fail=True` to simulate an outage.
    """

    OPENERS = [
        "This matchup shapes up in favor of the pick.",
        "The edge goes to the favorite here.",
        "Expect a battle, but the numbers lean one way.",
    ]

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0, fail: bool = False):
        super().__init__(api_key, timeout)
        self.fail = fail
        self.calls = 0

    def generate(self, prompt: str) -> str:
        self.calls += 1
        if self.fail:
            raise ProviderError("Mock provider configured to fail", provider=self.provider_name)

        digest = int(hashlib.sha256(prompt.encode("utf-8")).hexdigest(), 16)
        opener = self.OPENERS[digest % len(self.OPENERS)]
        pick = next(
            (line.split(":", 1)[1].strip() for line in prompt.splitlines() if line.startswith("**PICK**")),
            "the favorite",
        )
        return f"{opener} Pick: {pick}."


ProviderRegistry.register("mock", MockAdapter)
