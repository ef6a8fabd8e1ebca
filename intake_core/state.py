import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from .classifier import classify
from .ledger import SessionLedger
from .models import PreviewHandle, SampleInfo, ScanRecord, ScanStatus, Verdict

DEFAULT_SCAN_DURATION_S = 3.5

# (label, offset in seconds from scan start)
SCAN_STEPS: List[Tuple[str, float]] = [
    ("Verifying Metadata...", 0.0),
    ("Scanning for GAN Artifacts...", 0.9),
    ("Cross-checking Clinical Hashes...", 1.8),
    ("Finalizing Report...", 2.7),
]


def active_step(elapsed_s: float) -> str:
    label = SCAN_STEPS[0][0]
    for step, at in SCAN_STEPS:
        if elapsed_s >= at:
            label = step
    return label


class ScanSession:
    """
    Upload -> scanning -> verdict state machine.

    `scheduler(delay, callback)` must return an object with `stop()`; in the
    app this is `App.set_timer`. `provider` acquires and releases preview
    handles. Every upload and reset bumps `generation`, and a completion
    carrying a stale generation is dropped.
    """

    def __init__(
        self,
        ledger: SessionLedger,
        provider,
        scheduler: Callable[[float, Callable[[], None]], Any],
        duration: float = DEFAULT_SCAN_DURATION_S,
        rng=None,
        clock: Callable[[], datetime] = datetime.now,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.ledger = ledger
        self.provider = provider
        self.scheduler = scheduler
        self.duration = duration
        self.rng = rng
        self.clock = clock
        self.monotonic = monotonic

        self.status = ScanStatus.IDLE
        self.file_name: Optional[str] = None
        self.preview: Optional[PreviewHandle] = None
        self.generation = 0
        self.pending: Optional[Tuple[Verdict, float]] = None
        self.last_record: Optional[ScanRecord] = None
        self.started_at: Optional[float] = None
        self._timer = None
        self._listeners: List[Callable[[ScanRecord], None]] = []

    def on_complete(self, listener: Callable[[ScanRecord], None]) -> None:
        self._listeners.append(listener)

    @property
    def confidence(self) -> Optional[float]:
        return self.pending[1] if self.pending else None

    @property
    def verdict(self) -> Optional[Verdict]:
        return self.pending[0] if self.pending else None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _release_preview(self) -> None:
        handle, self.preview = self.preview, None
        if handle is not None:
            self.provider.release(handle)

    def upload(self, file_name: Optional[str], source: Any = None) -> bool:
        """Start a scan. Returns False when there is nothing to scan."""
        if not file_name:
            return False

        # acquire first: a failing provider leaves the session untouched
        handle = self.provider.acquire(source if source is not None else file_name)

        self._cancel_timer()
        self._release_preview()

        self.generation += 1
        self.status = ScanStatus.SCANNING
        self.file_name = file_name
        self.preview = handle
        self.pending = classify(file_name, self.rng)
        self.last_record = None
        self.started_at = self.monotonic()

        generation = self.generation
        self._timer = self.scheduler(self.duration, lambda: self._complete(generation))
        return True

    def _complete(self, generation: int) -> None:
        if generation != self.generation or self.status is not ScanStatus.SCANNING:
            return
        self._timer = None
        verdict, confidence = self.pending
        record = ScanRecord(
            file_name=self.file_name,
            timestamp=self.clock().replace(microsecond=0),
            verdict=verdict,
            confidence=confidence,
        )
        self.status = ScanStatus.for_verdict(verdict)
        self.last_record = record
        self.ledger.append(record)
        for listener in list(self._listeners):
            listener(record)

    def reset(self) -> None:
        if self.status is ScanStatus.IDLE and self.preview is None and self._timer is None:
            return
        self._cancel_timer()
        self._release_preview()
        self.generation += 1
        self.status = ScanStatus.IDLE
        self.file_name = None
        self.pending = None
        self.last_record = None
        self.started_at = None

    def progress(self, now: Optional[float] = None) -> float:
        if self.status.is_terminal:
            return 1.0
        if self.status is not ScanStatus.SCANNING or self.started_at is None:
            return 0.0
        if self.duration <= 0:
            return 1.0
        now = self.monotonic() if now is None else now
        return min(1.0, max(0.0, (now - self.started_at) / self.duration))

    def current_step(self, now: Optional[float] = None) -> Optional[str]:
        if self.status is not ScanStatus.SCANNING or self.started_at is None:
            return None
        now = self.monotonic() if now is None else now
        return active_step(now - self.started_at)


@dataclass
class AppState:
    session: ScanSession
    current_sample: Optional[SampleInfo] = None
    source_path: Optional[Path] = None
    last_report_dir: Optional[Path] = None

    @property
    def ledger(self) -> SessionLedger:
        return self.session.ledger
