# ~/repositories/cx-pageobject/src/cx_pageobject/logging_config.py
import logging
import sys
from typing import Optional, TextIO

import structlog

from .config import load_settings

PACKAGE_LOGGER = "cx_pageobject"
_HANDLER_NAME = "cx_pageobject.console"


def setup_logging(
    verbose: Optional[bool] = None, stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Sends the engine's structlog events to one console handler.

    Only the `cx_pageobject` logger tree is touched: the host test runner keeps
    its own root handlers and level. With `verbose` the engine's debug events
    (dispatch, strategy switches, dynamic selectors) are shown; otherwise only
    registrations and recorded failures. When `verbose` is not given,
    `CX_PAGEOBJECT_VERBOSE` decides. Calling it again replaces the handler.
    """
    if verbose is None:
        verbose = load_settings().verbose

    pre_chain = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
    ]
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain]
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processor=structlog.dev.ConsoleRenderer(),
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False
    return package_logger
