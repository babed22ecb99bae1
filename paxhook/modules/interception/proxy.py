"""
Local reverse proxy in front of the game backend.

Point the game (or a browser dev override) at this server: simple-chat calls
are answered by the configured AI provider, everything else is relayed to the
upstream backend unchanged.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response

from paxhook import __version__
from paxhook.foundation.config import ConfigManager
from paxhook.foundation.logging import logger
from paxhook.modules.llm_client import LLMClient
from .classifier import RequestClassifier
from .transport import InterceptingTransport

# Connection-scoped headers, plus the ones httpx recomputes on either side
_SKIP_HEADERS = {
    "connection", "keep-alive", "proxy-authenticate", "proxy-authorization",
    "te", "trailers", "transfer-encoding", "upgrade",
    "host", "content-length", "content-encoding",
}


def _filter_headers(pairs) -> list:
    return [(k, v) for k, v in pairs if k.lower() not in _SKIP_HEADERS]


def create_app(
    config_manager: ConfigManager,
    upstream: str,
    passthrough: Optional[httpx.AsyncBaseTransport] = None,
    llm_client: Optional[LLMClient] = None,
) -> FastAPI:
    """Builds the proxy app. Settings are read per request from config_manager."""
    intercept = config_manager.config.intercept

    provider_http: Optional[httpx.AsyncClient] = None
    if llm_client is None:
        provider_http = httpx.AsyncClient()
        llm_client = LLMClient(http_client=provider_http)

    transport = InterceptingTransport(
        settings_provider=config_manager.get_settings,
        passthrough=passthrough,
        llm_client=llm_client,
        classifier=RequestClassifier(intercept.privileged_schema_name),
        path_marker=intercept.path_marker,
    )
    client = httpx.AsyncClient(base_url=upstream, transport=transport, timeout=None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Proxying {upstream} (intercepting '{intercept.path_marker}')")
        yield
        await client.aclose()
        if provider_http is not None:
            await provider_http.aclose()

    app = FastAPI(title="Pax AI Hook", version=__version__, lifespan=lifespan)

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"])
    async def relay(path: str, request: Request) -> Response:
        upstream_response = await client.request(
            request.method,
            "/" + path,
            params=list(request.query_params.multi_items()),
            headers=_filter_headers(request.headers.items()),
            content=await request.body(),
        )
        response = Response(content=upstream_response.content, status_code=upstream_response.status_code)
        for key, value in _filter_headers(upstream_response.headers.multi_items()):
            response.headers.append(key, value)
        return response

    return app
