"""
Shared pytest fixtures for all test modules.
"""

from datetime import datetime

import pytest

from intake_core.ledger import SessionLedger
from intake_core.state import ScanSession
from tests.mocks.session_mocks import FakeProvider, FixedRandom, ManualScheduler


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def clock():
    return lambda: datetime(2024, 5, 1, 10, 30, 15, 987654)


@pytest.fixture
def session(scheduler, provider, clock):
    return ScanSession(
        SessionLedger(),
        provider,
        scheduler,
        duration=3.5,
        rng=FixedRandom(0.5),
        clock=clock,
    )


@pytest.fixture
def image_file(tmp_path):
    """Factory writing a small fake image under tmp_path/inbox."""
    inbox = tmp_path / "inbox"
    inbox.mkdir()

    def _make(name="scan.jpg", data=b"\xff\xd8\xff\xe0fake-jpeg"):
        p = inbox / name
        p.write_bytes(data)
        return p

    return _make
