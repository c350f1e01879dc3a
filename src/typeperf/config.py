# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar

"""
Runtime configuration for typeperf2, read from the environment
"""

import os

_TRUTHY = {'1', 'true', 'yes', 'on'}


class RunnerConfig:
    """
    Settings that do not belong on the command line.

    The positional argument contract leaves no room for options, so the
    few knobs the tool has come from environment variables:

    - TYPEPERF_LOG_FILE: append debug records to this file (off when unset)
    - TYPEPERF_LOG_LEVEL: level name for the log file (default: DEBUG)
    - TYPEPERF_STRICT_EXIT: exit with a distinct non-zero code per error kind
    """

    __slots__ = ('log_file', 'log_level', 'strict_exit')

    def __init__(self, **config):
        self.log_file = config.get('log_file')
        self.log_level = config.get('log_level', 'DEBUG')
        self.strict_exit = config.get('strict_exit', False)

    @classmethod
    def from_environ(cls, environ=None):
        """Build a config from ``environ`` (defaults to ``os.environ``)."""
        if environ is None:
            environ = os.environ

        return cls(
            log_file=environ.get('TYPEPERF_LOG_FILE') or None,
            log_level=(environ.get('TYPEPERF_LOG_LEVEL') or 'DEBUG').strip().upper(),
            strict_exit=environ.get('TYPEPERF_STRICT_EXIT', '').strip().lower() in _TRUTHY,
        )

    def __repr__(self):
        return (
            f"RunnerConfig(log_file={self.log_file!r}, log_level={self.log_level!r}, "
            f"strict_exit={self.strict_exit!r})"
        )
