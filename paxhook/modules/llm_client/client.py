from typing import Optional

import httpx

from paxhook.foundation.config import ProviderConfig
from paxhook.foundation.logging import logger
from .errors import MissingCredentialError
from .retry import RetryPolicy
from .router import ProviderRouter
from .schema import InternalRequest, ProviderResult


class LLMClient:
    """
    High-level client for a single completion.
    Picks the adapter for config.provider and runs it under the retry policy.
    """

    def __init__(self, router: Optional[ProviderRouter] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.router = router or ProviderRouter(http_client=http_client)
        self.retry_policy = retry_policy or RetryPolicy()

    async def complete(self, request: InternalRequest, config: ProviderConfig) -> ProviderResult:
        if config.requires_credential and not config.credential:
            raise MissingCredentialError(f"No API key configured for provider '{config.provider.value}'.")

        provider = self.router.get_provider(config.provider)

        logger.info(
            f"LLMClient Executing: {request.mode.value} -> {config.model_identifier} "
            f"(via {config.provider.value}, native_schema={request.is_privileged_schema})"
        )
        result = await self.retry_policy.run(lambda: provider.complete(request, config))
        logger.debug(f"LLMClient Received {len(result.raw_text)} chars from {result.provider}")
        return result
