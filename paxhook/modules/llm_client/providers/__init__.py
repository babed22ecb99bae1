from .base import BaseLLMProvider, OpenAICompatibleProvider
from .copilot import CopilotProvider
from .google import GoogleProvider
from .openrouter import OpenRouterProvider

__all__ = ["BaseLLMProvider", "OpenAICompatibleProvider", "CopilotProvider", "GoogleProvider", "OpenRouterProvider"]
