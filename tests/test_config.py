# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar
"""Tests for environment configuration and logging setup."""

import logging
import pytest

from typeperf.config import RunnerConfig
from typeperf.log import PACKAGE_LOGGER, configure_logging


@pytest.fixture
def package_logger():
    """Restore the package logger after a test adds handlers."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield logger

    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestRunnerConfig:
    """Tests for RunnerConfig."""

    def test_defaults(self):
        config = RunnerConfig()
        assert config.log_file is None
        assert config.log_level == 'DEBUG'
        assert config.strict_exit is False

    def test_empty_environment(self):
        config = RunnerConfig.from_environ({})
        assert config.log_file is None
        assert config.log_level == 'DEBUG'
        assert config.strict_exit is False

    def test_from_environ(self):
        config = RunnerConfig.from_environ({
            'TYPEPERF_LOG_FILE': '/tmp/typeperf.log',
            'TYPEPERF_LOG_LEVEL': ' info ',
            'TYPEPERF_STRICT_EXIT': 'yes',
        })
        assert config.log_file == '/tmp/typeperf.log'
        assert config.log_level == 'INFO'
        assert config.strict_exit is True

    @pytest.mark.parametrize('value, expected', [
        ('1', True), ('true', True), ('ON', True),
        ('0', False), ('no', False), ('', False),
    ])
    def test_strict_exit_values(self, value, expected):
        config = RunnerConfig.from_environ({'TYPEPERF_STRICT_EXIT': value})
        assert config.strict_exit is expected

    def test_repr(self):
        assert 'strict_exit=True' in repr(RunnerConfig(strict_exit=True))


class TestConfigureLogging:
    """Tests for the optional log file."""

    def test_no_log_file_adds_nothing(self, package_logger):
        before = list(package_logger.handlers)
        assert configure_logging(RunnerConfig()) is None
        assert package_logger.handlers == before

    def test_log_file_receives_records(self, package_logger, tmp_path):
        log_file = tmp_path / 'typeperf.log'
        handler = configure_logging(RunnerConfig(log_file=str(log_file)))

        logging.getLogger('typeperf.runner').debug("Invocation: %r", ['raw'])
        handler.flush()

        content = log_file.read_text(encoding='utf-8')
        assert 'DEBUG' in content
        assert "typeperf.runner: Invocation: ['raw']" in content

    def test_level_filters_records(self, package_logger, tmp_path):
        log_file = tmp_path / 'typeperf.log'
        handler = configure_logging(RunnerConfig(log_file=str(log_file), log_level='WARNING'))

        logging.getLogger('typeperf.runner').info("not written")
        logging.getLogger('typeperf.runner').warning("written")
        handler.flush()

        content = log_file.read_text(encoding='utf-8')
        assert 'not written' not in content
        assert 'written' in content

    def test_unknown_level_falls_back_to_debug(self, package_logger, tmp_path):
        handler = configure_logging(
            RunnerConfig(log_file=str(tmp_path / 'typeperf.log'), log_level='CHATTY')
        )
        assert handler.level == logging.DEBUG
