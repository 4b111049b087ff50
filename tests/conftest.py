import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_tfrun_logger():
    logger = logging.getLogger("tfrun")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
