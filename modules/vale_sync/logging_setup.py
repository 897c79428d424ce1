"""
Logging for the Vale sync layer.

Every module logs through logging.getLogger(__name__), so everything lands
under the package logger configured here. Levels follow one split:

    DEBUG    each gateway request, fetch counts, dedup skips, HubSpot pushes
    INFO     create/update/delete against the API, session refreshes
    WARNING  store and portfolio failures

httpx logs every request at INFO on its own; that is only wanted when the
package itself runs at DEBUG.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import Config

PACKAGE_LOGGER = "modules.vale_sync"
HTTP_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def parse_level(name) -> int:
    """Level number for a name like 'debug'; unknown names mean INFO."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, 'vale_sync', False)


def setup_logging(cfg: Config) -> logging.Logger:
    """
    Route package logs to stderr and, if cfg.LOG_FILE is set, a rotating file.

    Calling it again with another config swaps the handlers a previous call
    installed; handlers attached by the host application stay put.
    """
    level = parse_level(cfg.LOG_LEVEL)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if _is_ours(h)]:
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stderr)]
    if cfg.LOG_FILE:
        log_path = Path(cfg.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        ))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.vale_sync = True
        logger.addHandler(handler)

    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger
