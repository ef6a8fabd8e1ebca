from pathlib import Path
from typing import Callable, List, Optional, Tuple

from intake_core.geometry import Annotation, annotate, demo_region
from intake_core.ledger import LedgerSnapshot, SessionLedger
from intake_core.models import Region, ScanRecord
from intake_core.slider import SliderController
from intake_core.state import AppState, ScanSession
from app.services import staging, export


class ScanController:
    def __init__(self, settings, scheduler, rng=None, provider=None, region_source: Optional[Callable[[ScanRecord], Region]] = None):
        self.settings = settings
        ws = self.workspace
        self.provider = provider or staging.PreviewProvider(ws / "previews")
        session = ScanSession(
            SessionLedger(),
            self.provider,
            scheduler,
            duration=float(settings.get("scan_duration_s", 3.5)),
            rng=rng,
        )
        self.state = AppState(session=session)
        self.region_source = region_source
        self.slider = SliderController(self.slider_initial)
        session.on_complete(self._on_complete)

    @property
    def workspace(self) -> Path:
        return Path(self.settings.get("workspace_path", "workspace"))

    @property
    def slider_initial(self) -> float:
        return float(self.settings.get("slider_initial", 0.5))

    @property
    def session(self) -> ScanSession:
        return self.state.session

    def _on_complete(self, record: ScanRecord) -> None:
        # new before/after pair
        self.slider.reset(self.slider_initial)

    def import_and_scan(self, src_path: str | Path) -> Tuple[bool, str]:
        """
        Stage the picked file as the session preview and start the simulated scan.
        Returns (ok: bool, message: str).
        """
        src = Path(src_path) if src_path else None
        if src is None or not src.name:
            return False, "No file selected."
        try:
            started = self.session.upload(src.name, src)
        except staging.StagingError as e:
            return False, f"Import failed: {e}"
        if not started:
            return False, "No file selected."
        self.state.source_path = src
        self.state.current_sample = staging.compute_metadata(self.session.preview.path)
        self.state.last_report_dir = None
        return True, f"Scanning {src.name} ({self.session.duration:g}s)"

    def rescan(self) -> Tuple[bool, str]:
        src = self.state.source_path
        if src is None or not self.session.file_name:
            return False, "No file to rescan."
        return self.import_and_scan(src)

    def reset(self) -> Tuple[bool, str]:
        self.session.reset()
        self.state.source_path = None
        self.state.current_sample = None
        self.state.last_report_dir = None
        self.slider.reset(self.slider_initial)
        return True, "Session reset."

    def region_for(self, record: Optional[ScanRecord]) -> Optional[Region]:
        if record is None:
            return None
        if self.region_source is not None:
            return self.region_source(record)
        if self.settings.get("demo_mode", True):
            return demo_region(record.file_name)
        return None

    def evidence(self) -> Optional[Annotation]:
        record = self.session.last_record
        region = self.region_for(record)
        if region is None:
            return None
        preview = self.session.preview
        return annotate(
            region,
            preview.uri if preview else None,
            magnification=float(self.settings.get("zoom_magnification", 260)),
        )

    def telemetry(self) -> LedgerSnapshot:
        return self.state.ledger.snapshot(
            limit=int(self.settings.get("recent_limit", 10)),
            floor=int(self.settings.get("bar_floor", 12)),
            scale=int(self.settings.get("bar_scale", 48)),
        )

    def export_current(self, formats: List[str]) -> Tuple[bool, str]:
        """
        Export the report for the completed scan.
        Returns (ok, message).
        """
        record = self.session.last_record
        if record is None:
            return False, "Nothing to export."
        stamp = record.timestamp.strftime("%Y%m%d_%H%M%S")
        out_dir = self.workspace / "reports" / f"{stamp}_{Path(record.file_name).stem}"
        try:
            for fmt in formats:
                export.export_report(record, self.state.current_sample, self.evidence(), out_dir, fmt=fmt)
        except Exception as e:
            return False, f"Export failed: {e}"
        self.state.last_report_dir = out_dir
        return True, f"Exported to {out_dir} ({', '.join(formats)})"
