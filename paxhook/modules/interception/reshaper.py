from typing import Optional

from pydantic import BaseModel

from paxhook.foundation.logging import logger
from paxhook.modules.llm_client.schema import RequestMode
from paxhook.modules.llm_client.utils import JsonRepair, dumps_compact


class ReshapedResponse(BaseModel):
    """Body handed back to the game, plus what happened while cleaning it."""
    body: str
    mode: RequestMode
    extraction_failed: bool = False
    json_valid: Optional[bool] = None   # None for chat (never parsed)
    unwrapped_key: Optional[str] = None


class ResponseReshaper:
    """
    Cleans provider text into the exact JSON the game expects.
    Never raises on bad model output: once a response exists, the game gets it.
    """

    def reshape(self, raw_text: str, mode: RequestMode) -> ReshapedResponse:
        text = JsonRepair.strip_code_fences(raw_text)

        if mode == RequestMode.CHAT:
            return ReshapedResponse(body=dumps_compact({"message": text}), mode=mode)

        extraction_failed = False
        block = JsonRepair.extract_object_block(text)
        if block.success:
            text = block.data
        else:
            extraction_failed = True
            logger.error("JSON not found in response for action!")

        envelope_inner = JsonRepair.unwrap_schema_envelope(text)
        if envelope_inner is not None:
            logger.debug("Unwrapped schema envelope from model output")
            text = envelope_inner

        parsed = JsonRepair.try_parse(text)
        if parsed.success:
            logger.debug("JSON VALID.")
        else:
            logger.error(f"INVALID JSON ({parsed.error}): {text[:500]}")

        unwrapped_key = None
        root = JsonRepair.unwrap_root_key(text)
        if root is not None:
            unwrapped_key, text = root
            logger.info(f"Unwrapped root key \"{unwrapped_key}\"")

        return ReshapedResponse(
            body=text,
            mode=mode,
            extraction_failed=extraction_failed,
            json_valid=parsed.success,
            unwrapped_key=unwrapped_key,
        )
