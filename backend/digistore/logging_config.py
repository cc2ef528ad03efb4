"""Console logging for the ``digistore`` package.

All modules log through ``logging.getLogger(__name__)`` so their records end
up on the single handler installed here.
"""

import logging
import sys

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    root_logger = logging.getLogger("digistore")
    root_logger.setLevel(level.upper())

    # Prevent duplicate handlers on repeated calls (e.g. tests)
    if root_logger.handlers:
        return root_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False
    return root_logger
