from typing import Any, Dict

import httpx

from paxhook.foundation.config import ProviderConfig
from paxhook.foundation.logging import logger
from .base import BaseLLMProvider
from ..errors import ProviderError
from ..schema import InternalRequest, ProviderResult
from ..utils.schema_normalizer import normalize_schema

GOOGLE_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GoogleProvider(BaseLLMProvider):
    """
    Provider for Google AI Studio (generateContent).
    Thinking models may emit thought parts ahead of the answer, so the answer
    is read from the last part that carries text.
    """
    name = "google"

    def build_payload(self, request: InternalRequest, config: ProviderConfig) -> Dict[str, Any]:
        gen_config: Dict[str, Any] = {
            "temperature": 0.7,
            "thinkingConfig": {
                "include_thoughts": True,
                "thinking_budget": config.structured_output_budget,
            },
        }
        if request.is_privileged_schema and request.json_schema:
            gen_config["responseMimeType"] = "application/json"
            gen_config["responseSchema"] = normalize_schema(request.json_schema)
            logger.debug("Google: using native responseSchema")

        return {
            "contents": [{"parts": [{"text": request.prompt_text}]}],
            "generationConfig": gen_config,
        }

    async def complete(self, request: InternalRequest, config: ProviderConfig) -> ProviderResult:
        url = f"{GOOGLE_API_BASE}/models/{config.model_identifier}:generateContent"
        payload = self.build_payload(request, config)

        logger.debug(f"Google Request: Model={config.model_identifier}")
        try:
            async with self._http(config.timeout) as http:
                response = await http.post(
                    url,
                    params={"key": config.credential or ""},
                    json=payload,
                    timeout=config.timeout,
                )
        except httpx.TransportError as e:
            raise ProviderError(f"Network error contacting Google API: {e!r}") from e

        if not response.is_success:
            raise ProviderError(f"Google API Error: {response.text}", status=response.status_code)

        return self._result(self.extract_text(response.json()), config)

    @staticmethod
    def extract_text(body: Dict[str, Any]) -> str:
        candidates = body.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        for part in reversed(parts):
            if part.get("text"):
                return part["text"]
        return ""
