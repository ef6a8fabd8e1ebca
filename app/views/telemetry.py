from textual.widgets import Static
from rich.console import Group
from rich.table import Table
from rich.text import Text

from intake_core.models import Verdict

BAR_CELL = 4  # display units per block


class TelemetryView(Static):
    def update_snapshot(self, snap):
        if not snap or not snap.total:
            self.update("No scans this session.")
            return

        summary = Text.from_markup(
            f"[b]Scans:[/b] {snap.total}  |  "
            f"[green]Authentic: {snap.authentic_count}[/green]  |  "
            f"[red]Tampered: {snap.tampered_count}[/red]"
        )

        table = Table(title="Recent scans", expand=True)
        table.add_column("Time", no_wrap=True)
        table.add_column("File")
        table.add_column("Verdict", no_wrap=True)
        table.add_column("Conf.", justify="right")
        table.add_column("Trend", no_wrap=True)

        for record, height in zip(snap.recent, snap.bar_heights):
            color = "red" if record.verdict is Verdict.TAMPERED else "green"
            table.add_row(
                record.timestamp.strftime("%H:%M:%S"),
                record.file_name,
                f"[{color}]{record.verdict.value}[/{color}]",
                f"{record.confidence:.1f}",
                f"[{color}]" + "█" * max(1, height // BAR_CELL) + f"[/{color}]",
            )

        self.update(Group(summary, table))
