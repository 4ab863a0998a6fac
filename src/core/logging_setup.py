"""
Logging Setup

Installs one stdout handler on the root logger. Modules keep using
logging.getLogger(__name__).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at startup"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(str(level).upper())
    root.handlers.clear()
    root.addHandler(handler)

    # PIL logs every plugin it probes at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
