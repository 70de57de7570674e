"""logging initialisation for the command line."""
import logging
import sys
from typing import Optional

_handler: Optional[logging.StreamHandler] = None


def setup_logging(level: str = "WARNING") -> None:
    """send log records to stderr so stdout stays parseable."""
    global _handler

    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # already configured; just follow the current stderr
    if _handler is not None:
        _handler.setStream(sys.stderr)
        return

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(_handler)
