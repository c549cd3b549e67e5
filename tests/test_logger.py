# Copyright 2026 Michael Ellis
# SPDX-License-Identifier: Apache-2.0
"""Tests for smcsmooth.logger."""

import logging

import pytest
from rich.logging import RichHandler

from smcsmooth.logger import PACKAGE_LOGGER, get_logger, setup_logger
from smcsmooth.smoother import particle_smoother


@pytest.fixture
def fresh_logger(request):
    """A per-test logger name so tests do not touch the package logger."""
    name = f'smcsmooth_test.{request.node.name}'
    logger = logging.getLogger(name)
    yield name
    for handler in _own_handlers(logger):
        logger.removeHandler(handler)
    logger.propagate = True


def _own_handlers(logger):
    return [h for h in logger.handlers if h.get_name() == PACKAGE_LOGGER]


class TestSetupLogger:
    """Handler installation."""

    def test_rich_handler(self, fresh_logger):
        logger = setup_logger(fresh_logger, level='DEBUG')
        assert logger.level == logging.DEBUG
        handlers = _own_handlers(logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
        assert logger.propagate is False

    def test_plain_handler(self, fresh_logger):
        logger = setup_logger(fresh_logger, use_rich=False)
        handlers = _own_handlers(logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert not isinstance(handlers[0], RichHandler)

    def test_second_call_only_changes_level(self, fresh_logger):
        setup_logger(fresh_logger, level='INFO')
        logger = setup_logger(fresh_logger, level='ERROR')
        assert len(_own_handlers(logger)) == 1
        assert logger.level == logging.ERROR

    def test_foreign_handler_does_not_block_setup(self, fresh_logger):
        foreign = logging.StreamHandler()
        logging.getLogger(fresh_logger).addHandler(foreign)
        try:
            logger = setup_logger(fresh_logger)
            assert len(_own_handlers(logger)) == 1
            assert foreign in logger.handlers
        finally:
            logging.getLogger(fresh_logger).removeHandler(foreign)


class TestGetLogger:
    """Module loggers live below the package logger."""

    def test_module_logger(self):
        logger = get_logger('smcsmooth.smoother')
        assert logger.name == 'smcsmooth.smoother'
        assert _own_handlers(logging.getLogger(PACKAGE_LOGGER))

    def test_default_is_package_logger(self):
        assert get_logger().name == PACKAGE_LOGGER


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestSmootherLogging:
    """The smoother reports progress and failures."""

    @pytest.fixture
    def records(self):
        package = logging.getLogger(PACKAGE_LOGGER)
        handler = _ListHandler()
        old_level = package.level
        package.addHandler(handler)
        package.setLevel(logging.DEBUG)
        yield handler.records
        package.removeHandler(handler)
        package.setLevel(old_level)

    def test_progress(self, toy_problem, records):
        particle_smoother(*toy_problem)
        messages = [r.getMessage() for r in records]
        assert any('Smoothing 2 particles over 3 steps' in m for m in messages)
        assert any('Smoothed time step 0' in m for m in messages)
        assert any('finished' in m for m in messages)

    def test_failure_is_logged(self, toy_problem, records):
        particles, wf, params = toy_problem
        with pytest.raises(Exception):
            particle_smoother(particles, wf, params, mode='bogus')
        assert any(r.levelno == logging.WARNING for r in records)
