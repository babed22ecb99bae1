from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class RequestMode(str, Enum):
    """Response shape class the game expects back."""
    CHAT = "chat"
    STRUCTURED_ACTION = "structured_action"


class InternalRequest(BaseModel):
    """Provider-neutral request built once per intercepted call."""
    model_config = ConfigDict(frozen=True)

    prompt_text: str
    mode: RequestMode = RequestMode.CHAT
    json_schema: Optional[Dict[str, Any]] = None  # The game's schema, untouched
    is_privileged_schema: bool = False            # Use the provider's native structured output


class ProviderResult(BaseModel):
    """Text of the single completion extracted from a provider envelope."""
    model_config = ConfigDict(protected_namespaces=())

    raw_text: str
    provider: str
    model_name: str
