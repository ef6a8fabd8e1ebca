from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class Verdict(str, Enum):
    AUTHENTIC = "authentic"
    TAMPERED = "tampered"


class ScanStatus(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    AUTHENTIC = "authentic"
    TAMPERED = "tampered"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanStatus.AUTHENTIC, ScanStatus.TAMPERED)

    @property
    def label(self) -> str:
        if self is ScanStatus.SCANNING:
            return "Running"
        if self.is_terminal:
            return "Complete"
        return "Idle"

    @classmethod
    def for_verdict(cls, verdict: Verdict) -> "ScanStatus":
        return cls.TAMPERED if verdict is Verdict.TAMPERED else cls.AUTHENTIC


@dataclass(frozen=True)
class ScanRecord:
    file_name: str
    timestamp: datetime
    verdict: Verdict
    confidence: float


@dataclass(frozen=True)
class Region:
    """Normalized rectangle, every component relative to the image box."""
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class PreviewHandle:
    uri: str
    path: Path


@dataclass
class SampleInfo:
    path: Path
    size: int
    sha256: str
    mime: Optional[str] = None
