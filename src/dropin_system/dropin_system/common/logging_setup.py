from __future__ import annotations

import logging

from flask import Flask

BASE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
TRACE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(pathname)s:%(lineno)d %(message)s"

# root of this package, whether imported as dropin_system or src.dropin_system.dropin_system
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def configure_logging(app: Flask, *, debug: bool, trace_level: int = 0) -> None:
    """Configure the package logger and ``app.logger`` with one handler."""
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(TRACE_FORMAT if trace_level > 0 else BASE_FORMAT)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for logger in (pkg_logger, app.logger):
        logger.setLevel(level)
        for old in list(logger.handlers):
            logger.removeHandler(old)
        logger.addHandler(handler)
    pkg_logger.propagate = False
