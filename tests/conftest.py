"""Shared fixtures: every test starts with an empty registry and default config."""

import logging

import pytest

from synthtype.config import reset_config
from synthtype.logging import ROOT_LOGGER
from synthtype.registry import reset_registry


@pytest.fixture(autouse=True)
def isolated_synthtype():
    registry = reset_registry()
    reset_config()
    yield registry
    reset_registry()
    reset_config()

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers.clear()
    root.addHandler(logging.NullHandler())
    root.setLevel(logging.NOTSET)
