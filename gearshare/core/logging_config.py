# File: gearshare/core/logging_config.py

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Safe to call more than once (e.g. when tests build several apps).
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_gearshare", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gearshare = True
        root.addHandler(handler)

    # SQL statements only when explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
