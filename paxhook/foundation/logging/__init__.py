from .logger import InterceptHandler, setup_logger
# Bound after the submodule import, which would otherwise shadow the name.
from loguru import logger

__all__ = ["logger", "setup_logger", "InterceptHandler"]
