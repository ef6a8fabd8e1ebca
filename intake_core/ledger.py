from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .models import ScanRecord, Verdict

RECENT_LIMIT = 10
BAR_FLOOR = 12
BAR_SCALE = 48


def bar_height(confidence: float, max_confidence: float, floor: int = BAR_FLOOR, scale: int = BAR_SCALE) -> int:
    return max(floor, round(confidence / max_confidence * scale))


@dataclass(frozen=True)
class LedgerSnapshot:
    records: Tuple[ScanRecord, ...]
    total: int
    tampered_count: int
    authentic_count: int
    recent: Tuple[ScanRecord, ...]
    max_confidence: float
    bar_heights: Tuple[int, ...]


class SessionLedger:
    """Append-only log of completed scans for the current session."""

    def __init__(self):
        self._records: List[ScanRecord] = []

    def append(self, record: ScanRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ScanRecord]:
        return iter(tuple(self._records))

    def snapshot(self, limit: int = RECENT_LIMIT, floor: int = BAR_FLOOR, scale: int = BAR_SCALE) -> LedgerSnapshot:
        records = tuple(self._records)
        total = len(records)
        tampered = sum(1 for r in records if r.verdict is Verdict.TAMPERED)
        recent = records[-limit:] if limit > 0 else ()
        max_conf = max([1.0] + [r.confidence for r in recent])
        return LedgerSnapshot(
            records=records,
            total=total,
            tampered_count=tampered,
            authentic_count=total - tampered,
            recent=recent,
            max_confidence=max_conf,
            bar_heights=tuple(bar_height(r.confidence, max_conf, floor, scale) for r in recent),
        )
