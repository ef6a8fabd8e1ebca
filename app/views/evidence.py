from rich.text import Text
from textual.widgets import Static

from intake_core.geometry import rasterize

GRID_COLS = 32
GRID_ROWS = 10


class EvidenceView(Static):
    def update_annotation(self, annotation, cols: int = GRID_COLS, rows: int = GRID_ROWS):
        if annotation is None:
            self.update("No evidence region.")
            return
        col0, row0, col1, row1 = rasterize(annotation, cols, rows)
        grid = Text()
        for r in range(rows):
            for c in range(cols):
                inside = col0 <= c <= col1 and row0 <= r <= row1
                edge = inside and (c in (col0, col1) or r in (row0, row1))
                if edge:
                    grid.append("█", style="bold red")
                elif inside:
                    grid.append("▒", style="red")
                else:
                    grid.append("·", style="grey35")
            grid.append("\n")
        box = annotation.rect_box
        zoom = annotation.zoom_focus
        grid.append(
            f"Region {box.left:.0f}%,{box.top:.0f}% {box.width:.0f}x{box.height:.0f}%  |  "
            f"zoom {zoom.x:.0f}% {zoom.y:.0f}% @ {zoom.magnification:.0f}%",
            style="cyan",
        )
        self.update(grid)
