import json
import re
from typing import Any, Optional, Tuple
from paxhook.foundation.types import Result

_FENCE_JSON = re.compile(r"```json", re.IGNORECASE)


def dumps_compact(value: Any) -> str:
    """Serializes the way the game's own client does (no spaces, UTF-8 kept)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class JsonRepair:
    """
    Utilities for pulling a usable JSON document out of LLM output text.
    Every helper is best-effort: failures are reported, never raised.
    """

    @staticmethod
    def strip_code_fences(text: str) -> str:
        """Removes ```json / ``` markers anywhere in the text and trims."""
        return _FENCE_JSON.sub("", text or "").replace("```", "").strip()

    @staticmethod
    def extract_object_block(text: str) -> Result[str]:
        """Slices from the first '{' to the last '}' (drops chatty wrapping)."""
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end < start:
            return Result.fail("JSON object delimiters not found")
        return Result.ok(text[start:end + 1])

    @staticmethod
    def try_parse(text: str) -> Result[Any]:
        try:
            return Result.ok(json.loads(text))
        except (TypeError, ValueError) as e:
            return Result.fail(str(e))

    @staticmethod
    def unwrap_schema_envelope(text: str) -> Optional[str]:
        """
        Models sometimes echo the schema wrapper back ({name, strict, schema: {...}}).
        Returns the inner object's serialization, or None when there is no envelope.
        """
        parsed = JsonRepair.try_parse(text)
        if parsed.success and isinstance(parsed.data, dict) and isinstance(parsed.data.get("schema"), dict):
            return dumps_compact(parsed.data["schema"])
        return None

    @staticmethod
    def unwrap_root_key(text: str) -> Optional[Tuple[str, str]]:
        """
        {"advisorResponse": {...}} -> ("advisorResponse", '{...}').
        Only a single key holding a (non-array) object is unwrapped; otherwise None.
        """
        parsed = JsonRepair.try_parse(text)
        if not parsed.success or not isinstance(parsed.data, dict) or len(parsed.data) != 1:
            return None
        key, value = next(iter(parsed.data.items()))
        if isinstance(value, dict):
            return key, dumps_compact(value)
        return None
