import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_plugin_logger():
    logger = logging.getLogger("argos_translation")
    handlers = list(logger.handlers)
    propagate = logger.propagate
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = propagate
    logger.setLevel(level)
