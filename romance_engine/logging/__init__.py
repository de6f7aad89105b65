"""
Centralized logging configuration for the Band Romance Engine
============================================================

Provides standardized logging with:
- Plain module loggers that never touch configuration on import
- Structured JSON output for production, colored console output for debugging
- Per-relationship tagging of log records via with_romance_id()

The package logger is configured once, either explicitly through
configure_logging() (the CLI does this) or lazily by the first progression
operation that enters a with_romance_id() block. Callers that only import the
scorers never load configuration.
"""

import logging
import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config import ConfigManager, get_config

PACKAGE_LOGGER = 'romance_engine'

# Relationship currently being worked on, stamped onto every package record
current_romance_id: ContextVar[Optional[str]] = ContextVar('romance_id', default=None)

_STANDARD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'romance_id'}


class RomanceIdFilter(logging.Filter):
    """Tag records with the relationship id from the current context"""

    def filter(self, record):
        record.romance_id = current_romance_id.get() or '-'
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log shippers"""

    def format(self, record):
        entry = {
            'ts': datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'romance_id': getattr(record, 'romance_id', '-'),
            'message': record.getMessage(),
            'where': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        # logger.info(..., extra={...}) fields
        entry.update({
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        })

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output for development"""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelname, '')
        clock = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        romance_id = getattr(record, 'romance_id', '-')
        tag = f" <{romance_id[:8]}>" if romance_id != '-' else ""

        line = f"{clock} {color}{record.levelname:<7}{self.RESET} {record.name}{tag}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggingManager:
    """
    Installs handlers on the package logger from an engine configuration.

    Only the 'romance_engine' logger is touched; host applications keep
    their root logger.
    """

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config if config is not None else get_config()
        self.package_logger = logging.getLogger(PACKAGE_LOGGER)
        self._install_handlers()

    def _install_handlers(self):
        engine = self.config.engine
        level = getattr(logging, engine.log_level.upper(), logging.INFO)

        self.package_logger.handlers.clear()
        self.package_logger.setLevel(level)

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(ConsoleFormatter() if engine.debug_mode else StructuredFormatter())
        self._add_handler(console, level)

        if engine.log_file:
            log_path = Path(engine.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            # Files always get JSON
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(StructuredFormatter())
            self._add_handler(file_handler, level)

    def _add_handler(self, handler: logging.Handler, level: int):
        handler.setLevel(level)
        handler.addFilter(RomanceIdFilter())
        self.package_logger.addHandler(handler)


_logging_manager: Optional[LoggingManager] = None


def configure_logging(config: Optional[ConfigManager] = None) -> LoggingManager:
    """
    (Re)configure the package logger.

    Args:
        config: Configuration to read; defaults to the global configuration

    Returns:
        The active LoggingManager
    """
    global _logging_manager
    _logging_manager = LoggingManager(config)
    return _logging_manager


def is_logging_configured() -> bool:
    return _logging_manager is not None


def reset_logging() -> None:
    """Forget the current setup so the next configuration re-reads settings"""
    global _logging_manager
    _logging_manager = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Safe to call at import time: no configuration is read here.

    Usage:
        from romance_engine.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def get_romance_id() -> Optional[str]:
    """Relationship id of the current context, if any"""
    return current_romance_id.get()


@contextmanager
def with_romance_id(romance_id: str):
    """
    Tag every package log line inside the block with a relationship id

    Usage:
        with with_romance_id(relationship.id):
            logger.info("Rolling for detection")
    """
    if _logging_manager is None:
        configure_logging()

    token = current_romance_id.set(romance_id)
    try:
        yield
    finally:
        current_romance_id.reset(token)
