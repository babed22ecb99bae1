from .client import LLMClient
from .errors import HookError, MissingCredentialError, ProviderError, UnknownProviderError
from .retry import RetryPolicy, is_retryable_error, with_retry
from .router import ProviderRouter
from .schema import InternalRequest, ProviderResult, RequestMode

__all__ = [
    "LLMClient",
    "HookError",
    "MissingCredentialError",
    "ProviderError",
    "UnknownProviderError",
    "RetryPolicy",
    "is_retryable_error",
    "with_retry",
    "ProviderRouter",
    "InternalRequest",
    "ProviderResult",
    "RequestMode",
]
