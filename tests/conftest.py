"""
Shared pytest fixtures for the APIM CLI test suite.

Provides an in-memory Management API double, environment isolation for the
``APIM_*`` variables and restoration of the root logger, which the CLI
reconfigures on every invocation.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import pytest

from apim_cli.logging_config import SafeStreamHandler
from apim_cli.management.models import Application


class FakeManagementApi:
    """Records calls and replays canned applications or failures."""

    def __init__(
        self,
        applications: Optional[List[Application]] = None,
        login_error: Optional[Exception] = None,
        listing_error: Optional[Exception] = None,
    ):
        self.applications = list(applications or [])
        self.login_error = login_error
        self.listing_error = listing_error
        self.login_calls: List[tuple] = []
        self.list_calls: List[int] = []
        self.closed = False

    async def __aenter__(self) -> "FakeManagementApi":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    async def login(self, username: str, password: str) -> None:
        self.login_calls.append((username, password))
        if self.login_error is not None:
            raise self.login_error

    def list_applications(self, delay_period: int = 50):
        self.list_calls.append(delay_period)
        return self._iterate()

    async def _iterate(self):
        for application in self.applications:
            yield application
        if self.listing_error is not None:
            raise self.listing_error


def make_applications(count: int) -> List[Application]:
    return [Application(id=f"app-{i}", name=f"Application {i}") for i in range(count)]


@pytest.fixture
def fake_api_factory():
    """Build a FakeManagementApi with ``count`` applications."""

    def _factory(count: int = 0, **kwargs: Any) -> FakeManagementApi:
        return FakeManagementApi(make_applications(count), **kwargs)

    return _factory


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without any APIM_* variables and outside any directory holding a .env."""
    for key in list(os.environ):
        if key.startswith("APIM_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler, SafeStreamHandler):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def application_payloads() -> List[Dict[str, Any]]:
    """Raw listing entries shaped like the Management API's."""
    return [
        {"id": "4c2f1e5a", "name": "Mobile App", "type": "SIMPLE", "status": "ACTIVE"},
        {"id": "9b8d7c6e", "name": "Partner Portal", "type": "BROWSER", "status": "ACTIVE"},
        {"id": "1a2b3c4d", "name": "Batch Jobs", "type": "BACKEND_TO_BACKEND"},
    ]
