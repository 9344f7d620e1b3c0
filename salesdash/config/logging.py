"""
Logging Configuration for the Sales Dashboard Service

structlog events are rendered through the stdlib logging tree so that
uvicorn, pdfminer and application loggers share one handler and format.
"""

import logging
import sys
from typing import Dict, List, Optional

import structlog
from structlog.types import Processor

from salesdash.config.settings import get_settings

# Third-party loggers and the level they are pinned to (None follows the app)
_LIBRARY_LEVELS: Dict[str, Optional[int]] = {
    "uvicorn": None,
    "uvicorn.error": None,
    "uvicorn.access": None,
    "pdfminer": logging.ERROR,
    "pdfplumber": logging.WARNING,
}


def _pre_chain() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for the application.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    pre_chain = _pre_chain()
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(settings.monitoring.log_format),
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name, pinned in _LIBRARY_LEVELS.items():
        library_logger = logging.getLogger(name)
        library_logger.handlers = []
        library_logger.propagate = True
        library_logger.setLevel(pinned if pinned is not None else level)

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level_name,
        format=settings.monitoring.log_format,
        environment=settings.app_env,
    )
