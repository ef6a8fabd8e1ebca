"""
Unit tests for intake_core/state.py: the scan session state machine.

Uses ManualScheduler, FakeProvider and a fixed clock from conftest.
"""

from datetime import datetime

import pytest

from intake_core.geometry import demo_region
from intake_core.ledger import SessionLedger
from intake_core.models import Region, ScanStatus, Verdict
from intake_core.state import SCAN_STEPS, ScanSession, active_step
from tests.mocks.session_mocks import FakeProvider, FixedRandom


# ---------------------------------------------------------------------------
# Happy paths
# ---------------------------------------------------------------------------


def test_starts_idle(session):
    assert session.status is ScanStatus.IDLE
    assert session.file_name is None
    assert session.preview is None
    assert session.status.label == "Idle"


def test_scan_jpg_scenario(session, scheduler):
    assert session.upload("scan.jpg", "/tmp/scan.jpg") is True
    assert session.status is ScanStatus.SCANNING
    assert session.status.label == "Running"
    assert len(scheduler.pending) == 1
    assert scheduler.pending[0].delay == 3.5
    assert len(session.ledger) == 0

    scheduler.fire_all()

    assert session.status is ScanStatus.AUTHENTIC
    assert session.status.label == "Complete"
    assert session.confidence == 99.3
    records = list(session.ledger)
    assert len(records) == 1
    assert records[0].verdict is Verdict.AUTHENTIC
    assert records[0].confidence == 99.3
    assert records[0].file_name == "scan.jpg"
    assert session.last_record == records[0]


def test_scan_tempered_scenario(session, scheduler):
    session.upload("scan_tempered.png")
    scheduler.fire_all()
    assert session.status is ScanStatus.TAMPERED
    assert session.confidence == 91.7
    assert demo_region(session.file_name) == Region(0.58, 0.22, 0.22, 0.22)


def test_token_match_scenario(session, scheduler):
    session.upload("xray_manipulated.jpg")
    scheduler.fire_all()
    assert session.status is ScanStatus.TAMPERED
    assert 88 <= session.confidence < 92


def test_timestamp_has_second_resolution(session, scheduler):
    session.upload("scan.jpg")
    scheduler.fire_all()
    assert session.last_record.timestamp == datetime(2024, 5, 1, 10, 30, 15)


def test_verdict_fixed_at_scan_start(scheduler, provider):
    class CountingRandom:
        calls = 0

        def random(self):
            CountingRandom.calls += 1
            return 0.5

    s = ScanSession(SessionLedger(), provider, scheduler, rng=CountingRandom())
    s.upload("knee.png")
    decided = s.pending
    assert CountingRandom.calls == 1
    scheduler.fire_all()
    assert CountingRandom.calls == 1
    assert (s.last_record.verdict, s.last_record.confidence) == decided


def test_listeners_notified_once(session, scheduler):
    seen = []
    session.on_complete(seen.append)
    session.upload("scan.jpg")
    scheduler.fire_all()
    scheduler.fire_all()
    assert len(seen) == 1
    assert seen[0].file_name == "scan.jpg"


# ---------------------------------------------------------------------------
# No-op input
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("name", [None, ""])
def test_empty_upload_is_ignored(session, scheduler, provider, name):
    assert session.upload(name) is False
    assert session.status is ScanStatus.IDLE
    assert scheduler.timers == []
    assert provider.acquired == []


# ---------------------------------------------------------------------------
# Re-entrancy and cancellation
# ---------------------------------------------------------------------------


def test_reupload_while_scanning_cancels_previous_timer(session, scheduler, provider):
    session.upload("first.png")
    first_timer = scheduler.timers[0]
    session.upload("scan.jpg")

    assert first_timer.stopped
    assert len(scheduler.pending) == 1
    assert provider.released == [provider.acquired[0]]
    assert session.preview == provider.acquired[1]

    scheduler.fire_all()
    assert len(session.ledger) == 1
    assert session.last_record.file_name == "scan.jpg"


def test_stale_completion_is_dropped_even_if_timer_fires(session, scheduler):
    session.upload("first.png")
    stale = scheduler.timers[0]
    session.upload("second.png")
    # a scheduler that ignored stop() would still call this
    stale.callback()
    assert session.status is ScanStatus.SCANNING
    assert len(session.ledger) == 0


def test_generation_bumps_on_upload_and_reset(session, scheduler):
    g0 = session.generation
    session.upload("a.png")
    session.upload("b.png")
    assert session.generation == g0 + 2
    scheduler.fire_all()
    session.reset()
    assert session.generation == g0 + 3


def test_upload_after_result_replaces_preview(session, scheduler, provider):
    session.upload("scan.jpg")
    scheduler.fire_all()
    session.upload("scan_tempered.png")
    assert session.status is ScanStatus.SCANNING
    assert session.last_record is None
    assert provider.released == [provider.acquired[0]]
    scheduler.fire_all()
    assert [r.verdict for r in session.ledger] == [Verdict.AUTHENTIC, Verdict.TAMPERED]


def test_ledger_length_matches_completed_scans(session, scheduler):
    names = ["a.png", "fake_b.png", "scan.jpg", "c_edited.png", "d.png"]
    for name in names:
        session.upload(name)
        scheduler.fire_all()
    assert [r.file_name for r in session.ledger] == names
    snapshot = session.ledger.snapshot()
    session.upload("late.png")
    scheduler.fire_all()
    assert [r.file_name for r in session.ledger][:5] == [r.file_name for r in snapshot.records]


# ---------------------------------------------------------------------------
# Reset and resource release
# ---------------------------------------------------------------------------


def test_reset_releases_preview_once(session, scheduler, provider):
    session.upload("scan.jpg")
    scheduler.fire_all()
    session.reset()
    session.reset()
    assert session.status is ScanStatus.IDLE
    assert session.file_name is None
    assert session.preview is None
    assert session.last_record is None
    assert provider.released == provider.acquired


def test_reset_from_idle_is_noop(session, provider):
    g = session.generation
    session.reset()
    session.reset()
    assert session.status is ScanStatus.IDLE
    assert session.generation == g
    assert provider.released == []


def test_reset_while_scanning_cancels(session, scheduler, provider):
    session.upload("scan.jpg")
    session.reset()
    assert scheduler.pending == []
    scheduler.timers[0].callback()
    assert session.status is ScanStatus.IDLE
    assert len(session.ledger) == 0
    assert provider.released == provider.acquired


def test_failed_acquire_leaves_session_untouched(scheduler, clock):
    provider = FakeProvider()
    s = ScanSession(SessionLedger(), provider, scheduler, rng=FixedRandom(0.5), clock=clock)
    s.upload("scan.jpg")
    before = (s.status, s.file_name, s.preview, s.generation, s.pending)

    provider.fail = True
    with pytest.raises(OSError):
        s.upload("other.png")

    assert (s.status, s.file_name, s.preview, s.generation, s.pending) == before
    assert len(scheduler.pending) == 1
    assert provider.released == []


# ---------------------------------------------------------------------------
# Progress and steps
# ---------------------------------------------------------------------------


def test_active_step_offsets():
    assert active_step(0) == SCAN_STEPS[0][0]
    assert active_step(0.89) == SCAN_STEPS[0][0]
    assert active_step(0.9) == "Scanning for GAN Artifacts..."
    assert active_step(2.0) == "Cross-checking Clinical Hashes..."
    assert active_step(10) == "Finalizing Report..."


def test_progress_follows_monotonic_clock(scheduler, provider):
    now = [100.0]
    s = ScanSession(SessionLedger(), provider, scheduler, duration=4.0, monotonic=lambda: now[0])
    assert s.progress() == 0.0
    assert s.current_step() is None

    s.upload("scan.jpg")
    now[0] = 101.0
    assert s.progress() == pytest.approx(0.25)
    assert s.current_step() == "Scanning for GAN Artifacts..."
    now[0] = 200.0
    assert s.progress() == 1.0

    scheduler.fire_all()
    assert s.progress() == 1.0
    assert s.current_step() is None
    s.reset()
    assert s.progress() == 0.0
