import sys
from pathlib import Path
from loguru import logger
import logging

from chiso_bookings.core.config import settings

LINE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Chatty stdlib loggers kept at WARNING
QUIET_LOGGERS = ("uvicorn.access", "urllib3")


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records (uvicorn, urllib3) into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = None):
    logger.remove()
    logger.add(sys.stdout, level=level or settings.LOG_LEVEL, format=CONSOLE_FORMAT)

    # Failed bookings and unhandled errors, rotated
    logger.add(
        str(Path(settings.LOG_DIR) / "errors.log"),
        level="ERROR",
        rotation="10 MB",
        retention="1 month",
        compression="zip",
        format=LINE_FORMAT,
    )

    # force=True replaces whatever handlers the root logger already had
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

__all__ = ["logger", "setup_logging"]
