# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar

"""
Logging setup for typeperf2

Stdout belongs to the counter value, so log records never go to a console
stream. They are dropped unless a log file is configured.
"""

import logging

PACKAGE_LOGGER = 'typeperf'
LOG_FORMAT = '%(asctime)s %(levelname)s [%(process)d] %(name)s: %(message)s'

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(config):
    """Attach a file handler to the package logger when a log file is set.

    Returns the handler that was added, or None.
    """
    if not config.log_file:
        return None

    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.DEBUG

    handler = logging.FileHandler(config.log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler
