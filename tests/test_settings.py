import logging

import pytest

from bitscriptr import Network, Settings
from bitscriptr.settings import configure_logging


def test_defaults(monkeypatch):
    monkeypatch.delenv("BITSCRIPTR_NETWORK", raising=False)
    monkeypatch.delenv("BITSCRIPTR_DESCRIPTOR_CHECKSUM", raising=False)
    assert Settings.from_env() == Settings(network=None, descriptor_checksum=False)


def test_from_env(monkeypatch):
    monkeypatch.setenv("BITSCRIPTR_NETWORK", "test")
    monkeypatch.setenv("BITSCRIPTR_DESCRIPTOR_CHECKSUM", "1")
    assert Settings.from_env() == Settings(network=Network.TEST, descriptor_checksum=True)

    monkeypatch.setenv("BITSCRIPTR_NETWORK", "MAIN")
    assert Settings.from_env().network == Network.MAIN

    monkeypatch.setenv("BITSCRIPTR_NETWORK", "any")
    assert Settings.from_env().network is None


def test_invalid_network(monkeypatch):
    monkeypatch.setenv("BITSCRIPTR_NETWORK", "signet")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_configure_logging(monkeypatch):
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        monkeypatch.setenv("BITSCRIPTR_LOG_LEVEL", "debug")
        configure_logging()
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)
