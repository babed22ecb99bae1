from typing import Any, Callable, Optional

import httpx

from paxhook.foundation.config import ProviderConfig
from paxhook.foundation.logging import logger
from paxhook.modules.llm_client import LLMClient
from .classifier import RequestClassifier
from .reshaper import ResponseReshaper

DEFAULT_PATH_MARKER = "/api/simple-chat"

SettingsProvider = Callable[[], ProviderConfig]


class InterceptingTransport(httpx.AsyncBaseTransport):
    """
    httpx transport that answers the game's simple-chat calls from the
    configured AI provider and forwards everything else to `passthrough`.

    Any failure on the AI path falls back to the original destination, so the
    caller never sees a hung or broken request.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        passthrough: Optional[httpx.AsyncBaseTransport] = None,
        llm_client: Optional[LLMClient] = None,
        classifier: Optional[RequestClassifier] = None,
        reshaper: Optional[ResponseReshaper] = None,
        path_marker: str = DEFAULT_PATH_MARKER,
    ):
        self._settings_provider = settings_provider
        self._passthrough = passthrough or httpx.AsyncHTTPTransport()
        self.llm_client = llm_client or LLMClient()
        self.classifier = classifier or RequestClassifier()
        self.reshaper = reshaper or ResponseReshaper()
        self.path_marker = path_marker

    def matches(self, request: httpx.Request) -> bool:
        return self.path_marker in request.url.path

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if not self.matches(request):
            return await self._passthrough.handle_async_request(request)

        settings = self._settings_provider()
        if settings.requires_credential and not settings.credential:
            logger.warning("No API Key configured. Forwarding to the original backend.")
            return await self._passthrough.handle_async_request(request)

        try:
            return await self._answer(request, settings)
        except Exception:
            logger.exception("Critical failure on AI path; falling back to the original backend.")
            return await self._passthrough.handle_async_request(request)

    async def _answer(self, request: httpx.Request, settings: ProviderConfig) -> httpx.Response:
        # Reading caches the body, so a fallback can still forward it
        body = await request.aread()
        internal = self.classifier.classify(body)

        result = await self.llm_client.complete(internal, settings)
        reshaped = self.reshaper.reshape(result.raw_text, internal.mode)

        return httpx.Response(
            200,
            headers={"Content-Type": "application/json"},
            content=reshaped.body.encode("utf-8"),
            request=request,
        )

    async def aclose(self) -> None:
        await self._passthrough.aclose()


def create_intercepting_client(settings_provider: SettingsProvider, **kwargs: Any) -> httpx.AsyncClient:
    """
    AsyncClient whose simple-chat calls are served by the AI provider.
    Transport options (passthrough, llm_client, classifier, reshaper,
    path_marker) are split from the client options.
    """
    transport_keys = ("passthrough", "llm_client", "classifier", "reshaper", "path_marker")
    transport_options = {k: kwargs.pop(k) for k in transport_keys if k in kwargs}
    transport = InterceptingTransport(settings_provider, **transport_options)
    return httpx.AsyncClient(transport=transport, **kwargs)
