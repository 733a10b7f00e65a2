"""Log output for cmddoc runs.

Pages can be rendered to stdout, so diagnostics always go to stderr.
A log file can be added on top through the ``logging`` section of the
config file.
"""

import logging
import sys
from typing import Optional


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Attach stderr and optional file handlers to the ``cmddoc`` logger.

    Module loggers such as ``cmddoc.output.markdown`` propagate to it.
    Calling this again replaces the handlers of the previous call.

    Args:
        level: Level name such as "DEBUG" or "WARNING". Unknown names
            mean INFO.
        log_format: ``logging.Formatter`` format string.
        log_file: Path of a file that receives the same records as
            stderr, or None for stderr only.

    Returns:
        The ``cmddoc`` logger.
    """
    package_logger = logging.getLogger("cmddoc")
    package_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(numeric_level)
    formatter = logging.Formatter(log_format)

    package_logger.addHandler(
        _handler(logging.StreamHandler(sys.stderr), numeric_level, formatter)
    )
    if log_file:
        package_logger.addHandler(
            _handler(logging.FileHandler(log_file), numeric_level, formatter)
        )

    package_logger.debug("Logging initialized at level %s", level)
    return package_logger
