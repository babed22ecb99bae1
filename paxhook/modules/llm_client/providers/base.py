from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import openai

from paxhook.foundation.config import ProviderConfig
from ..errors import ProviderError
from ..schema import InternalRequest, ProviderResult


class BaseLLMProvider(ABC):
    """
    One completion backend. Implementations build the vendor request from an
    InternalRequest and extract the single completion text.
    Providers never retry; callers wrap complete() in a RetryPolicy.
    """
    name: str = "base"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        # Shared client (tests, the local proxy); None means one client per call
        self._http_client = http_client

    @abstractmethod
    async def complete(self, request: InternalRequest, config: ProviderConfig) -> ProviderResult:
        pass

    @asynccontextmanager
    async def _http(self, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client

    def _result(self, text: Optional[str], config: ProviderConfig) -> ProviderResult:
        return ProviderResult(raw_text=text or "", provider=self.name, model_name=config.model_identifier)


class OpenAICompatibleProvider(BaseLLMProvider):
    """Chat-completions backends driven through the openai SDK."""
    error_label: str = "OpenAI-compatible API"

    @abstractmethod
    def _client_options(self, config: ProviderConfig) -> dict:
        """base_url / api_key / default_headers for openai.AsyncOpenAI."""

    def _extra_body(self, request: InternalRequest) -> dict:
        return {}

    async def complete(self, request: InternalRequest, config: ProviderConfig) -> ProviderResult:
        # Transient client per call: settings may change between calls
        client = openai.AsyncOpenAI(
            max_retries=0,
            timeout=config.timeout,
            http_client=self._http_client,
            **self._client_options(config),
        )
        kwargs = {
            "model": config.model_identifier,
            "messages": [{"role": "user", "content": request.prompt_text}],
            **self._extra_body(request),
        }
        try:
            completion = await client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            raise ProviderError(f"{self.error_label} Error: {e.message}", status=e.status_code) from e
        except openai.APIConnectionError as e:
            raise ProviderError(f"Network error connecting to {self.error_label}: {e}") from e
        finally:
            if self._http_client is None:
                await client.close()

        choices = completion.choices or []
        content = choices[0].message.content if choices and choices[0].message else None
        return self._result(content, config)
