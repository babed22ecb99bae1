from typing import Callable, Dict, Optional

import httpx

from paxhook.foundation.config import ProviderName
from paxhook.foundation.logging import logger
from .errors import UnknownProviderError
from .providers import BaseLLMProvider, CopilotProvider, GoogleProvider, OpenRouterProvider

ProviderFactory = Callable[[Optional[httpx.AsyncClient]], BaseLLMProvider]

DEFAULT_PROVIDERS: Dict[ProviderName, ProviderFactory] = {
    ProviderName.GOOGLE: GoogleProvider,
    ProviderName.OPENROUTER: OpenRouterProvider,
    ProviderName.COPILOT: CopilotProvider,
}


class ProviderRouter:
    """
    Maps the configured provider name to its adapter.
    Adapters hold no settings, so instances are cached; configs are not.
    """
    def __init__(self, http_client: Optional[httpx.AsyncClient] = None,
                 factories: Optional[Dict[ProviderName, ProviderFactory]] = None):
        self._http_client = http_client
        self._factories = dict(DEFAULT_PROVIDERS if factories is None else factories)
        self._providers: Dict[ProviderName, BaseLLMProvider] = {}

    def register(self, name: ProviderName, factory: ProviderFactory) -> None:
        self._factories[name] = factory
        self._providers.pop(name, None)

    def get_provider(self, name: ProviderName) -> BaseLLMProvider:
        if name in self._providers:
            return self._providers[name]

        factory = self._factories.get(name)
        if factory is None:
            logger.error(f"Provider '{name}' implementation not found.")
            raise UnknownProviderError(f"Provider '{name}' not supported.")

        provider = factory(self._http_client)
        self._providers[name] = provider
        return provider
