# sass_importer/logging_setup.py
import logging
import sys
from typing import Optional, TextIO

import structlog

LOGGER_NAME = "sass_importer"
VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def level_for_verbosity(verbosity: int) -> int:
    # -v is info, -vv and beyond is debug.
    return VERBOSITY_LEVELS.get(verbosity, logging.DEBUG if verbosity > 1 else logging.WARNING)


def _renderer(force_json_logs: bool, stream: TextIO):
    if force_json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    is_tty = getattr(stream, "isatty", lambda: False)()
    return structlog.dev.ConsoleRenderer(colors=is_tty)


def configure_logging(verbosity: int = 0, force_json_logs: bool = False, stream: Optional[TextIO] = None) -> int:
    """Route structlog events through the stdlib `sass_importer` logger.

    Resolution events (`candidate_resolved`, `import_url_not_found`, ...) are
    emitted at debug/info, so the default level only shows warnings such as
    unreadable manifests or ignored options. Returns the level applied.
    """
    log_level = level_for_verbosity(verbosity)
    target = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(force_json_logs, target),
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    structlog.get_logger(__name__).debug("logging_configured", level=logging.getLevelName(log_level), json=force_json_logs)
    return log_level
