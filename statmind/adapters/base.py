"""Base adapter protocol for text-generation providers."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class ReasoningProvider(ABC):
    """Abstract text-generation capability: prompt in, text out."""

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        """Initialize adapter with optional API key and request timeout (seconds)."""
        self.api_key = api_key
        self.timeout = timeout
        self.provider_name = self.__class__.__name__.replace("Adapter", "").lower()

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return generated text. Raises ProviderError on any failure."""
        pass


class ProviderRegistry:
    """Registry for reasoning provider adapters."""

    _adapters: Dict[str, type] = {}

    @classmethod
    def register(cls, name: str, adapter_class: type):
        """Register a provider adapter."""
        cls._adapters[name] = adapter_class

    @classmethod
    def get_adapter(cls, name: str, **kwargs) -> ReasoningProvider:
        """Get an instance of a provider adapter."""
        if name not in cls._adapters:
            raise ValueError(f"Unknown provider: {name}")
        return cls._adapters[name](**kwargs)

    @classmethod
    def list_providers(cls) -> List[str]:
        """List available providers."""
        return list(cls._adapters.keys())
