"""Logging configuration for placematch."""

import logging
import os

import structlog


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Route structlog events through stdlib logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Falls back to the
               LOG_LEVEL env var, then INFO.
        json_output: Render one JSON object per event instead of the colored
               console format. Falls back to PLACEMATCH_LOG_JSON=1.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)
    if json_output is None:
        json_output = os.environ.get("PLACEMATCH_LOG_JSON") == "1"

    logging.basicConfig(format="%(message)s", level=numeric_level)

    # jieba prints its prefix-dict build on every fresh process
    logging.getLogger("jieba").setLevel(max(numeric_level, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
