from typing import Optional


class HookError(Exception):
    """Base class for failures on the AI path."""


class ProviderError(HookError):
    """
    A provider call failed.
    `status` is the HTTP status when a response was received, None for
    transport-level failures (whose message then starts with 'Network error').
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MissingCredentialError(HookError):
    """The active provider needs an API key and none is configured."""


class UnknownProviderError(HookError):
    """No adapter is registered for the configured provider."""
