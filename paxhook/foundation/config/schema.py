import os
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderName(str, Enum):
    """Completion backends the hook can route to."""
    GOOGLE = "google"
    OPENROUTER = "openrouter"
    COPILOT = "copilot"


class ProviderConfig(BaseModel):
    """
    Read-only snapshot of the active provider's settings.
    Taken once per intercepted call; never cached across calls.
    """
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider: ProviderName
    credential: Optional[str] = None
    model_identifier: str
    structured_output_budget: int = 4096
    base_url: Optional[str] = None
    timeout: float = 120.0
    referer: str = "https://paxhistoria.co/"
    app_title: str = "Pax Historia Hook"

    @property
    def requires_credential(self) -> bool:
        return self.provider != ProviderName.COPILOT

    @property
    def label(self) -> str:
        """Short 'PROVIDER | model' string, as shown next to the game logo."""
        model = self.model_identifier
        if self.provider == ProviderName.OPENROUTER:
            model = model.split("/")[-1]
        return f"{self.provider.value.upper()} | {model}"


class HookSettings(BaseModel):
    """Persisted hook settings (one model per provider, one shared API key)."""
    model_config = ConfigDict(protected_namespaces=())

    provider: ProviderName = ProviderName.GOOGLE
    api_key: str = ""
    api_key_env: Optional[str] = Field("PAXHOOK_API_KEY", description="Env var consulted when api_key is empty")
    model_name: str = Field("gemini-3-flash-preview", description="Google AI Studio model")
    openrouter_model: str = "google/gemini-2.0-flash-thinking-exp:free"
    copilot_base_url: str = "http://localhost:4141"
    copilot_model: str = "gpt-4.1"
    thinking_budget: int = 4096
    request_timeout: float = Field(120.0, gt=0, description="Seconds per provider HTTP call")
    referer: str = "https://paxhistoria.co/"
    app_title: str = "Pax Historia Hook"

    @field_validator("copilot_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") or "http://localhost:4141"

    def resolve_credential(self) -> Optional[str]:
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.getenv(self.api_key_env) or None
        return None

    def snapshot(self) -> ProviderConfig:
        """Builds the ProviderConfig for whichever provider is active."""
        if self.provider == ProviderName.OPENROUTER:
            model, base_url = self.openrouter_model, None
        elif self.provider == ProviderName.COPILOT:
            model, base_url = self.copilot_model, self.copilot_base_url
        else:
            model, base_url = self.model_name, None

        return ProviderConfig(
            provider=self.provider,
            credential=self.resolve_credential() if self.provider != ProviderName.COPILOT else None,
            model_identifier=model,
            structured_output_budget=self.thinking_budget,
            base_url=base_url,
            timeout=self.request_timeout,
            referer=self.referer,
            app_title=self.app_title,
        )


class InterceptConfig(BaseModel):
    """Which outgoing calls get redirected, and how structured calls are treated."""
    path_marker: str = "/api/simple-chat"
    privileged_schema_name: str = "advisorResponse"


class SystemConfig(BaseModel):
    """Global system configuration."""
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/paxhook.log"


class AppConfig(BaseModel):
    """Root configuration object."""
    system: SystemConfig = Field(default_factory=SystemConfig)
    hook: HookSettings = Field(default_factory=HookSettings)
    intercept: InterceptConfig = Field(default_factory=InterceptConfig)
