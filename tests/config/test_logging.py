from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from casebridge.config import configure_logging
from casebridge.config.logging import NOISY_LOGGERS


@pytest.fixture(autouse=True)
def _restore_loggers() -> Iterator[None]:
    levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def test_quiets_dependency_loggers_outside_debug() -> None:
    configure_logging(level=logging.INFO)

    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)


def test_debug_lets_dependency_loggers_through() -> None:
    configure_logging(level=logging.WARNING)
    configure_logging(level=logging.DEBUG)

    assert all(logging.getLogger(name).level == logging.NOTSET for name in NOISY_LOGGERS)
