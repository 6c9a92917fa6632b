"""
Logging configuration

stderr sink plus rotating error.log and combined.log files
"""
import os
import sys
from loguru import logger

from community_api.config.settings import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"

_configured = False


def setup_logging(log_dir: str = None, level: str = None):
    """
    Configure loguru sinks for the API process

    Args:
        log_dir: directory for error.log / combined.log
        level: minimum level for the console and combined sinks
    """
    global _configured
    if _configured:
        return

    log_dir = log_dir or settings.LOG_DIR
    level = level or settings.LOG_LEVEL
    os.makedirs(log_dir, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    logger.add(
        f"{log_dir}/error.log",
        rotation="5 MB",
        retention=5,
        level="ERROR",
        serialize=True,
    )
    logger.add(
        f"{log_dir}/combined.log",
        rotation="5 MB",
        retention=5,
        level=level,
        serialize=True,
    )

    _configured = True
    logger.info(f"📝 Logging configured (level={level}, dir={log_dir})")
