from .classifier import RequestClassifier
from .reshaper import ReshapedResponse, ResponseReshaper
from .transport import InterceptingTransport, create_intercepting_client

__all__ = [
    "RequestClassifier",
    "ReshapedResponse",
    "ResponseReshaper",
    "InterceptingTransport",
    "create_intercepting_client",
]
