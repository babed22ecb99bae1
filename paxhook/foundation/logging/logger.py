import logging
import sys
from pathlib import Path
from loguru import logger
from paxhook.foundation.config import AppConfig

class InterceptHandler(logging.Handler):
    """Intercepts standard logging messages (httpx, openai, uvicorn) and redirects them to loguru."""
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

def setup_logger(config: AppConfig):
    """
    Configures loguru logger based on AppConfig.
    - Removes default handlers.
    - Adds console handler.
    - Adds file handler with rotation (if log_file is set).
    - Intercepts standard logging.
    """
    logger.remove()

    log_level = config.system.log_level.upper()

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    if config.system.log_file:
        log_file = Path(config.system.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_file),
            rotation="10 MB",
            retention="1 week",
            level=log_level,
            encoding="utf-8"
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(f"Logger initialized. Level: {log_level}")
