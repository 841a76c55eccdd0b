import logging
import sys
from pathlib import Path
from loguru import logger
from task_manager.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[env]} | {name}:{function}:{line} - {message}"

# Third-party loggers routed through loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (uvicorn's) to loguru, keeping the caller's location."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_dir: str = None, level: str = None):
    """Configure loguru sinks for the service and the client.

    Console output is colourised only in development; the file sinks tag every
    line with the environment so logs from several deployments can be merged.
    """
    log_dir = Path(log_dir or settings.LOG_DIR)
    level = level or settings.LOG_LEVEL
    development = settings.ENVIRONMENT == "development"

    logger.remove()
    logger.configure(extra={"env": settings.ENVIRONMENT})

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level, colorize=development)

    logger.add(
        str(log_dir / "error.log"),
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="7 days",
        # Tracebacks in production logs must not dump local variables
        diagnose=development,
    )
    logger.add(
        str(log_dir / "app.log"),
        format=FILE_FORMAT,
        level="DEBUG" if development else level,
        rotation="50 MB",
        retention="3 days",
        diagnose=development,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in INTERCEPTED_LOGGERS:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]
        logging.getLogger(logger_name).propagate = False

    logger.info(f"Logging configured (env={settings.ENVIRONMENT}, level={level}, dir={log_dir})")
