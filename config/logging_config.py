"""Logging setup shared by the analysis engine and the live scheduler."""

import logging
from typing import Optional

import structlog

from config.settings import AnalysisSettings, settings as default_settings

JSON_HANDLER_NAME = 'lotto-json'

# Applied to both structlog events and records from logging.getLogger(__name__)
SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def setup_logging(settings: Optional[AnalysisSettings] = None) -> None:
    """Setup structured logging configuration.

    Text mode is plain ``logging.basicConfig``. JSON mode installs a root
    handler whose formatter runs every module logger's records through the
    structlog chain, so ``analysis``, ``predictions`` and ``utils`` messages
    come out as JSON lines next to any structlog events.
    """
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format != "json":
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level]
        + SHARED_PROCESSORS
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.set_name(JSON_HANDLER_NAME)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    ))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == JSON_HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
