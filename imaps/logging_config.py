"""
Logging Setup
=============

Konfigurasi logging standar untuk aplikasi (satu stream handler di root logger).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install satu handler di root logger; aman dipanggil berulang kali."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_imaps_handler", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._imaps_handler = True
    root.addHandler(handler)

    # SQLAlchemy punya echo sendiri, jangan dobel
    logging.getLogger("sqlalchemy.engine").propagate = False
