"""Structured logging for the bot.

Every module logs through `get_module_logger()`, which binds the module it is
called from. Events emitted while a message is being handled also carry the
per-message context bound by the message handler (correlation id, author and
channel), merged in from structlog contextvars.
"""

import logging
import inspect
import sys
from typing import Any, List, MutableMapping, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from .config import settings


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _level() -> int:
    """Numeric level for LOG_LEVEL, INFO when the name is unknown."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def add_deployment(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Stamp production events with the deployed commit."""
    event_dict.setdefault("git_sha", settings.GIT_SHA)
    return event_dict


def _processors(production: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if production:
        processors += [
            add_deployment,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging() -> BoundLogger:
    """Configure structlog over stdlib logging and return the root logger.

    Under pytest every record is dropped at the root level.
    """
    if _is_test_environment():
        processors: List[Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        level = logging.CRITICAL + 1
    else:
        processors = _processors(settings.is_production)
        level = _level()

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=True)
    logging.root.setLevel(level)

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a logger bound to a module.

    Args:
        name: Dotted module name; defaults to the calling module

    Returns:
        Logger with `component` (last name segment) and `module_path` bound
    """
    if name is None:
        frame = inspect.currentframe()
        module = inspect.getmodule(frame.f_back) if frame is not None else None
        if module is None:
            return logger.bind(component="unknown")
        name = module.__name__

    return logger.bind(component=name.rsplit(".", 1)[-1], module_path=name)
