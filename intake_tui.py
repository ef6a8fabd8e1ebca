from textual.app import App, ComposeResult
from textual.widgets import Header, Footer, Button, Static, DirectoryTree, ProgressBar
from textual.containers import Horizontal, Vertical
from textual import events
from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import copy
import yaml

from app.controllers.scan import ScanController
from app.services.staging import ACCEPTED_SUFFIXES, is_accepted
from app.views.compare import CompareSlider
from app.views.evidence import EvidenceView
from app.views.file_info import FileInfo
from app.views.log import LogView
from app.views.status import StatusView
from app.views.telemetry import TelemetryView
from intake_core.models import ScanRecord, ScanStatus, Verdict


# ─────────────────────────────────────────
# Settings
# ─────────────────────────────────────────
DEFAULT_SETTINGS: Dict[str, Any] = {
    "workspace_path": "workspace",
    "scan_duration_s": 3.5,
    "slider_initial": 0.5,
    "recent_limit": 10,
    "bar_floor": 12,
    "bar_scale": 48,
    "zoom_magnification": 260,
    "demo_mode": True,
    "export_defaults": {"formats": ["json", "md", "html"]},
}


def load_settings(path: Path = Path("settings.yaml")) -> Dict[str, Any]:
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if path.exists():
        settings.update(yaml.safe_load(path.read_text()) or {})
    return settings


# ─────────────────────────────────────────
# Picker
# ─────────────────────────────────────────
class ImageTree(DirectoryTree):
    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return [p for p in paths if p.is_dir() or p.suffix.lower() in ACCEPTED_SUFFIXES]


class FilePicker(Vertical):
    def __init__(self, on_pick):
        super().__init__()
        self.on_pick = on_pick

    def compose(self) -> ComposeResult:
        yield Static("[b]Select an image to scan[/b] (Enter to select)  " + " ".join(ACCEPTED_SUFFIXES))
        desktop = Path.home() / "Desktop"
        base_path = desktop if desktop.exists() else Path.home()
        self.dir_tree = ImageTree(base_path)
        yield self.dir_tree
        yield Button("Close", id="fp_close")

    def on_mount(self):
        try:
            self.dir_tree.focus()
        except Exception:
            pass

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected):
        self.on_pick(event.path)
        self.remove()

    def on_button_pressed(self, event: Button.Pressed):
        if event.button.id == "fp_close":
            event.stop()
            self.remove()


# ─────────────────────────────────────────
# App
# ─────────────────────────────────────────
class ForensicIntakeTUI(App):
    TITLE = "AI Forensic Intake"
    CSS = """
    Screen { layout: vertical; }
    #toolbar { height: 3; }
    #main { height: 1fr; }
    #left { width: 56; }
    #right { width: 1fr; }
    #status { height: 5; }
    #progress { height: 1; }
    #fi { height: 6; }
    #telemetry { height: 1fr; }
    #compare { height: 7; border: round $accent; }
    #evidence { height: auto; }
    #log { height: 4; }
    #bottom { height: auto; border-top: solid $surface; }
    """
    BINDINGS = [
        ("i", "import", "Import"),
        ("r", "rescan", "Rescan"),
        ("x", "reset", "Reset"),
        ("e", "export", "Export"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.settings = settings if settings is not None else load_settings()
        self.controller = ScanController(self.settings, scheduler=self.set_timer)
        self.controller.session.on_complete(self._on_scan_complete)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="toolbar"):
            yield Button("Import", id="btn_import")
            yield Button("Rescan", id="btn_rescan")
            yield Button("Reset", id="btn_reset")
            yield Button("Export", id="btn_export")
        with Horizontal(id="main"):
            with Vertical(id="left"):
                self.status_view = StatusView(id="status")
                yield self.status_view
                self.progress_bar = ProgressBar(total=100, show_eta=False, id="progress")
                yield self.progress_bar
                self.file_info = FileInfo(id="fi")
                yield self.file_info
                self.telemetry_view = TelemetryView(id="telemetry")
                yield self.telemetry_view
            with Vertical(id="right"):
                self.compare = CompareSlider(self.controller.slider, id="compare")
                yield self.compare
                self.evidence_view = EvidenceView(id="evidence")
                yield self.evidence_view
                self.log_panel = LogView(id="log")
                yield self.log_panel

        self.bottom = Horizontal(id="bottom")
        yield self.bottom
        yield Footer()

    @property
    def _toolbar_ids(self):
        return ["btn_import", "btn_rescan", "btn_reset", "btn_export"]

    def _focus_toolbar_index(self, idx: int):
        ids = self._toolbar_ids
        idx = max(0, min(len(ids) - 1, idx))
        try:
            self.query_one(f"#{ids[idx]}").focus()
        except Exception:
            pass
        self._focused_idx = idx

    def on_mount(self):
        self._focused_idx = 0
        self._focus_toolbar_index(0)
        self.set_interval(0.2, self._tick)

        self._refresh_panels()
        self.log_panel.set_lines([f"Ready. Workspace: {self.controller.workspace}"])

    async def on_key(self, event: events.Key):
        focused = self.focused
        ids = self._toolbar_ids
        if not focused or getattr(focused, "id", None) not in ids:
            return
        if event.key in ("left", "right"):
            step = -1 if event.key == "left" else 1
            self._focus_toolbar_index((self._focused_idx + step) % len(ids))
            event.stop()

    def on_button_pressed(self, event: Button.Pressed):
        bid = event.button.id or ""
        if bid in self._toolbar_ids:
            getattr(self, f"action_{bid.split('_')[1]}")()

    # ─────────────────────────────────────
    # Toolbar actions
    # ─────────────────────────────────────
    def action_import(self):
        try:
            self.bottom.remove_children()
        except Exception:
            for c in list(self.bottom.children):
                c.remove()
        picker = FilePicker(self._on_file_picked)
        self.bottom.mount(picker)

    def action_rescan(self):
        try:
            ok, msg = self.controller.rescan()
            self._post_action(f"[cyan]Rescan:[/cyan] {msg}" if ok else f"[yellow]{msg}[/yellow]")
        except Exception as e:
            self.log_panel.set_lines([f"[red]Rescan failed:[/red] {e}"])

    def action_reset(self):
        try:
            ok, msg = self.controller.reset()
            self._post_action(msg)
        except Exception as e:
            self.log_panel.set_lines([f"[red]Reset failed:[/red] {e}"])

    def action_export(self):
        if self.controller.session.last_record is None:
            self.log_panel.set_lines(["[yellow]Nothing to export.[/yellow]"])
            return
        try:
            formats = self.settings.get("export_defaults", {}).get("formats", ["json", "md", "html"])
            ok, msg = self.controller.export_current(formats)
            self.log_panel.set_lines([msg if ok else f"[red]{msg}[/red]"])
        except Exception as e:
            self.log_panel.set_lines([f"[red]Export failed:[/red] {e}"])

    # ─────────────────────────────────────
    # Internal flows
    # ─────────────────────────────────────
    def _refresh_panels(self):
        session = self.controller.session
        self.status_view.update_status(session)
        self.progress_bar.update(progress=round(session.progress() * 100))
        self.file_info.update_info(self.controller.state.current_sample, session.preview)
        self.telemetry_view.update_snapshot(self.controller.telemetry())
        self.evidence_view.update_annotation(self.controller.evidence())
        self.compare.display = session.status.is_terminal
        self.compare.refresh()

    def _tick(self):
        if self.controller.session.status is ScanStatus.SCANNING:
            self.status_view.update_status(self.controller.session)
            self.progress_bar.update(progress=round(self.controller.session.progress() * 100))

    def _post_action(self, log: str):
        self._refresh_panels()
        self.log_panel.write_line(log)
        self.refresh(layout=True)

    def _on_scan_complete(self, record: ScanRecord):
        color = "red" if record.verdict is Verdict.TAMPERED else "green"
        self._post_action(
            f"[{color}]{record.verdict.value.upper()}[/{color}] {record.file_name} "
            f"({record.confidence:.1f}%)"
        )

    # ─────────────────────────────────────
    # Picker callbacks
    # ─────────────────────────────────────
    def _on_file_picked(self, path: Path):
        if not is_accepted(path):
            self.log_panel.set_lines([f"[yellow]Unsupported file:[/yellow] {Path(path).name}"])
            return
        try:
            ok, msg = self.controller.import_and_scan(path)
            self._post_action(msg if ok else f"[red]{msg}[/red]")
        except Exception as e:
            self.log_panel.set_lines([f"[red]Import/scan failed:[/red] {e}"])


def main():
    ForensicIntakeTUI().run()


if __name__ == "__main__":
    main()
