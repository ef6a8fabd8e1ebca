from rich.text import Text
from textual import events
from textual.widget import Widget

ROWS = 7


class CompareSlider(Widget):
    """
    Before/after strip. The overlay fills the cells left of the handle, the
    original shows to the right. Only a drag that starts on the handle moves it.
    """

    DEFAULT_CSS = """
    CompareSlider { height: 7; }
    """

    def __init__(self, controller, **kwargs):
        super().__init__(**kwargs)
        self.slider = controller
        self.left_label = "ORIGINAL"
        self.right_label = "OVERLAY"

    def _sync_bounds(self) -> None:
        region = self.content_region
        self.slider.set_bounds(region.x, region.width)

    def handle_column(self, width: int) -> int:
        return min(width - 1, int(self.slider.position * width))

    def render(self) -> Text:
        width = max(1, self.content_size.width)
        height = max(2, self.content_size.height or ROWS) - 1  # last line is the legend
        handle = self.handle_column(width)
        out = Text()
        for row in range(height):
            for col in range(width):
                if col == handle:
                    grip = "◆" if row == height // 2 else "┃"
                    out.append(grip, style="bold red" if self.slider.dragging else "red")
                elif col < handle:
                    out.append("▓", style="red3")
                else:
                    out.append("░", style="grey50")
            if row < height - 1:
                out.append("\n")
        out.append_text(Text(f"\n{self.right_label} {self.slider.handle_percent:.0f}%  |  "
                             f"{self.left_label} {self.slider.clip_percent:.0f}%", style="dim"))
        return out

    def on_resize(self, event: events.Resize) -> None:
        self._sync_bounds()

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self._sync_bounds()
        if not self.slider.hits_handle(event.screen_x):
            return
        self.slider.begin(event.button, event.screen_x)
        self.capture_mouse()
        self.refresh()
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.slider.move(event.button, event.screen_x):
            self.refresh()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self.slider.end(event.button):
            self.release_mouse()
            self.refresh()
