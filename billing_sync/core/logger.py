import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

# Set once sentry_sdk.init has run in this process
_sentry_initialized = False


def init_sentry(
    dsn: str,
    environment: str = "development",
    traces_sample_rate: float = 1.0,
) -> bool:
    """
    Start Sentry error reporting for the worker process.

    Jobs run outside any web framework, so failures reach Sentry through the
    logging integration: ERROR records become events, INFO records breadcrumbs.

    Args:
        dsn (str): Sentry DSN. Nothing happens when empty.
        environment (str): Environment reported with each event.
        traces_sample_rate (float): Share of jobs traced (0.0 to 1.0).

    Returns:
        bool: True if this call initialized Sentry.
    """
    global _sentry_initialized

    if _sentry_initialized or not dsn:
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.asyncio import AsyncioIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            AsyncioIntegration(),
        ],
    )
    _sentry_initialized = True
    return True


def _tag_component(sentry_tag: str) -> None:
    try:
        import sentry_sdk
    except ImportError:
        return
    sentry_sdk.set_tag("component", sentry_tag)


def setup_logger(
    name: str,
    log_file: str,
    level: int = logging.INFO,
    sentry_tag: Optional[str] = None,
) -> logging.Logger:
    """
    Return the named component logger, writing to ``log_file`` and the console.

    The file rotates at 5MB and keeps three backups. Its directory is created
    when missing. A logger that already has handlers is returned as is, so
    repeated calls do not duplicate output.

    Args:
        name (str): Logger name, e.g. "sync_logger".
        log_file (str): Path of the rotating log file.
        level (int, optional): Minimum level. Defaults to logging.INFO.
        sentry_tag (str, optional): Component tag attached to Sentry events.

    Returns:
        logging.Logger: The configured logger.
    """
    if sentry_tag and _sentry_initialized:
        _tag_component(sentry_tag)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (
        RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
