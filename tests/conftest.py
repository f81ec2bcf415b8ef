"""Shared fixtures for formguard tests."""

import os

import pytest

from formguard.core.config import Config, reset_config
from formguard.utils.logger import Logger, LogLevel, MemoryHandler
from formguard.validation.library import PredicateLibrary, default_library


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from FORMGUARD_* variables and the global config."""
    for key in list(os.environ):
        if key.startswith("FORMGUARD_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config():
    """Configuration with built-in defaults only."""
    return Config()


@pytest.fixture
def library(config):
    """Built-in predicate catalog."""
    return default_library(config)


@pytest.fixture
def log_handler():
    """Captures log records."""
    return MemoryHandler()


@pytest.fixture
def logger(log_handler):
    """Logger writing only to the memory handler."""
    return Logger(name="formguard.test", level=LogLevel.DEBUG, handlers=[log_handler])


@pytest.fixture
def fake_library():
    """Deterministic catalog: 'email' accepts only 'ok@test'."""
    fake = PredicateLibrary()
    fake.register("email", lambda value: value == "ok@test")
    return fake
