import json
from typing import Any, Dict, Optional, Union

from paxhook.foundation.logging import logger
from paxhook.modules.llm_client.schema import InternalRequest, RequestMode
from paxhook.modules.llm_client.utils import dumps_compact

CHAT_STAGE = "chatWithUser"
ADVISOR_SCHEMA_NAME = "advisorResponse"

SCHEMA_INSTRUCTION = (
    "\n\nTASK: Generate a valid JSON object matching this schema.\n"
    "SCHEMA: {schema}\n\n"
    "IMPORTANT: Return ONLY the JSON object. No markdown."
)


class RequestClassifier:
    """
    Turns the game's simple-chat payload into an InternalRequest.

    Only the advisor schema goes through a provider's native structured output;
    other schemas are embedded in the prompt text, since complex schemas are
    unreliable through generic structured-output channels.
    """

    def __init__(self, privileged_schema_name: str = ADVISOR_SCHEMA_NAME):
        self.privileged_schema_name = privileged_schema_name

    def classify(self, body: Union[bytes, str, Dict[str, Any], None]) -> InternalRequest:
        payload = self._load(body)
        prompt = payload.get("prompt") or ""
        schema: Optional[Dict[str, Any]] = payload.get("jsonSchema")
        # Falsy scalars (false, 0, "") mean no schema; empty containers still count.
        if not schema and not isinstance(schema, (dict, list)):
            schema = None

        if payload.get("promptStage") == CHAT_STAGE or schema is None:
            logger.info("Request type: CHAT (wrapper)")
            return InternalRequest(prompt_text=prompt, mode=RequestMode.CHAT)

        privileged = isinstance(schema, dict) and schema.get("name") == self.privileged_schema_name
        if not privileged:
            prompt += SCHEMA_INSTRUCTION.format(schema=dumps_compact(schema))

        logger.info(f"Request type: ACTION (raw JSON), native_schema={privileged}")
        return InternalRequest(
            prompt_text=prompt,
            mode=RequestMode.STRUCTURED_ACTION,
            json_schema=schema if isinstance(schema, dict) else None,
            is_privileged_schema=privileged,
        )

    @staticmethod
    def _load(body: Union[bytes, str, Dict[str, Any], None]) -> Dict[str, Any]:
        if body is None or body == b"" or body == "":
            return {}
        if isinstance(body, dict):
            return body
        payload = json.loads(body)
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object payload, got {type(payload).__name__}")
        return payload
