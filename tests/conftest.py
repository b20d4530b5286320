"""Shared fixtures for floatform tests."""

from __future__ import annotations

import pytest

from floatform.config import Config, set_config

from .virtual_host import VirtualHost


@pytest.fixture(autouse=True)
def _default_config():
    set_config(Config())
    yield
    set_config(Config())


@pytest.fixture
def host() -> VirtualHost:
    return VirtualHost(lines=40, columns=100)
