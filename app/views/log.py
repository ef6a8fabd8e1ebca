from textual.widgets import Static

class LogView(Static):
    """Tiny log widget with replace/append helpers, independent of Static internals."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # lines may arrive before mount
        self._buf: str = ""

    def on_mount(self) -> None:
        self.update(self._buf)

    def write_line(self, text: str) -> None:
        """Append a line to the log."""
        if self._buf:
            self._buf += "\n" + text
        else:
            self._buf = text
        self.update(self._buf)

    def set_lines(self, lines: list[str]) -> None:
        """Replace the entire log with these lines."""
        self._buf = "\n".join(lines) if lines else ""
        self.update(self._buf)

    @property
    def buffer(self) -> str:
        return self._buf
