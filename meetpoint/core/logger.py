# meetpoint/core/logger.py
"""
Single loguru sink for the service; modules do `from meetpoint.core.logger import logger`.
"""
import sys

from loguru import logger

from meetpoint.core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[service]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"service": settings.APP_NAME})
logger.add(
    sys.stdout,
    format=LOG_FORMAT,
    level=settings.LOG_LEVEL,
    backtrace=True,
    # Variable values in tracebacks may include request payloads
    diagnose=settings.ENVIRONMENT != "production",
)

__all__ = ["logger"]
