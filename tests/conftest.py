"""Shared pytest fixtures for the leetcode-mcp test suite."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from lcmcp.credentials import CredentialStore
from lcmcp.models import Credentials
from lcmcp.storage import Storage

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tmp_storage(tmp_path) -> Storage:
    """Returns a Storage instance using a temporary directory."""
    return Storage(base_path=tmp_path)


@pytest.fixture
def credential_store(tmp_storage) -> CredentialStore:
    return CredentialStore(tmp_storage)


@pytest.fixture
def sample_credentials() -> Credentials:
    return Credentials(
        csrf_token="test_csrf",
        session_token="test_session",
        created_at=NOW,
        site="global",
    )


@pytest.fixture
def mock_credential_store() -> MagicMock:
    """Returns a MagicMock for CredentialStore."""
    return MagicMock(spec=CredentialStore)
