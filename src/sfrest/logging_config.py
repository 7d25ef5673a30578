from __future__ import annotations

import logging
from typing import Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Least severe level each third-party logger may emit.
# sfrest.transport already logs one line per request.
QUIET_LOGGERS: Dict[str, int] = {
    "urllib3.connectionpool": logging.WARNING,
    "urllib3.connection": logging.ERROR,
}


def configure_logging(level: Optional[int]) -> int:
    """
    Set up root logging for the CLI and return the level applied.

    ``None`` means WARNING. When handlers already exist (an embedding app,
    pytest) only the level changes. Repeated calls are harmless.
    """
    applied = logging.WARNING if level is None else level
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(applied)
    else:
        logging.basicConfig(level=applied, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    for name, floor in QUIET_LOGGERS.items():
        lib_logger = logging.getLogger(name)
        if lib_logger.level < floor:
            lib_logger.setLevel(floor)

    return applied
