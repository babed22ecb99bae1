from typing import Any, List, Optional

import httpx

from paxhook.foundation.config import ProviderConfig
from paxhook.foundation.logging import logger
from paxhook.foundation.types import Result
from .base import OpenAICompatibleProvider

DEFAULT_COPILOT_BASE_URL = "http://localhost:4141"


class CopilotProvider(OpenAICompatibleProvider):
    """
    Provider for a locally hosted Copilot API (OpenAI-compatible, no key).
    Structured output is never requested natively; schemas travel in the prompt.
    """
    name = "copilot"
    error_label = "Copilot API"

    def _client_options(self, config: ProviderConfig) -> dict:
        base_url = (config.base_url or DEFAULT_COPILOT_BASE_URL).rstrip("/")
        return {
            "base_url": f"{base_url}/v1",
            "api_key": "dummy",
        }

    async def test_connection(self, base_url: Optional[str] = None, timeout: float = 10.0) -> Result[List[str]]:
        """
        Probes {base_url}/v1/models and returns the model ids it lists,
        deduplicated in the order served. Used for configuration only.
        """
        url = f"{(base_url or DEFAULT_COPILOT_BASE_URL).rstrip('/')}/v1/models"
        try:
            async with self._http(timeout) as http:
                response = await http.get(url, timeout=timeout)
        except httpx.TransportError as e:
            logger.warning(f"Copilot probe failed: {e!r}")
            return Result.fail(f"Network error connecting to Copilot API: {e!r}")

        if not response.is_success:
            return Result.fail(response.text or f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            return Result.fail(f"Invalid JSON from {url}")

        return Result.ok(self.parse_model_ids(body))

    @staticmethod
    def parse_model_ids(body: Any) -> List[str]:
        entries = body.get("data") if isinstance(body, dict) else None
        if not isinstance(entries, list) and isinstance(body, list):
            entries = body
        if not isinstance(entries, list):
            return []

        models: List[str] = []
        for entry in entries:
            model_id = entry.get("id") if isinstance(entry, dict) else entry
            if isinstance(model_id, str) and model_id and model_id not in models:
                models.append(model_id)
        return models
