from textual.widgets import Static

from intake_core.models import ScanStatus


class StatusView(Static):
    def update_status(self, session):
        status = session.status
        lines = [f"[b]Forensic Output[/b]  |  {status.label}"]
        if status is ScanStatus.SCANNING:
            lines.append(f"[cyan]{session.file_name}[/cyan]  {session.current_step() or ''}")
            lines.append("Generating forensic overlays...")
        elif status is ScanStatus.TAMPERED:
            lines.append("[bold red]CRITICAL ALERT[/bold red]")
            lines.append("[red]Manipulation artifacts detected across multiple regions.[/red]")
            lines.append(f"{session.file_name}  |  confidence {session.confidence:.1f}%")
        elif status is ScanStatus.AUTHENTIC:
            lines.append("[bold green]VERIFIED[/bold green]")
            lines.append("[green]No manipulation artifacts detected.[/green]")
            lines.append(f"{session.file_name}  |  confidence {session.confidence:.1f}%")
        else:
            lines.append("Awaiting input to begin forensic sweep")
        self.update("\n".join(lines))
