"""
Loguru setup for the API process.

Standard-library loggers (uvicorn, httpx, google-genai) are routed through
loguru so provider calls and request logs share one format.
"""
import logging
import sys
from loguru import logger
from eventora.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Per-request chatter from the HTTP clients and the Gemini SDK
QUIET_LOGGERS = ("httpx", "httpcore", "google_genai")


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _level() -> str:
    return settings.LOG_LEVEL or ("DEBUG" if settings.ENVIRONMENT == "development" else "INFO")


logger.remove()
logger.add(sys.stdout, format=CONSOLE_FORMAT, level=_level(), colorize=True)

if settings.ENVIRONMENT == "production":
    logger.add(
        settings.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        compression="zip",
        format=FILE_FORMAT,
        level="INFO",
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
for name in QUIET_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)

__all__ = ["logger"]
