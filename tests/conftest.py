"""
Shared fixtures: every test starts from the packaged configuration and a
fresh module-level tracer.
"""

import os

import pytest

import deeptrace.proxies.proxies as proxies_module
from deeptrace.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    for key in list(os.environ):
        if key.startswith("DEEPTRACE_"):
            monkeypatch.delenv(key)
    Settings.reset()
    monkeypatch.setattr(proxies_module, "_proxies", None)
    yield get_settings()
    Settings.reset()


@pytest.fixture
def events():
    return []


@pytest.fixture
def listener(events):
    return events.append
