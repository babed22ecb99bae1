from paxhook.foundation.config import ProviderConfig
from paxhook.foundation.logging import logger
from .base import OpenAICompatibleProvider
from ..schema import InternalRequest

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(OpenAICompatibleProvider):
    """
    Provider for OpenRouter (OpenAI-compatible).
    The game's schema is already in OpenAI's {name, strict, schema} shape, so it
    is forwarded as-is for the privileged schema.
    """
    name = "openrouter"
    error_label = "OpenRouter API"

    def _client_options(self, config: ProviderConfig) -> dict:
        return {
            "base_url": OPENROUTER_BASE_URL,
            "api_key": config.credential,
            "default_headers": {
                "HTTP-Referer": config.referer,
                "X-Title": config.app_title,
            },
        }

    def _extra_body(self, request: InternalRequest) -> dict:
        if request.is_privileged_schema and request.json_schema:
            logger.debug("OpenRouter: using response_format")
            return {
                "response_format": {
                    "type": "json_schema",
                    "json_schema": request.json_schema,
                }
            }
        return {}
