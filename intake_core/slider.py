from typing import Optional

from .geometry import clamp01


class SliderController:
    """
    Drag state for the before/after comparison.

    Position is the split in [0, 1]. Only a drag that starts on the handle
    moves it; callers run `hits_handle` before `begin`.
    """

    def __init__(self, initial: float = 0.5):
        self.position = clamp01(initial)
        self.dragging = False
        self.pointer_id: Optional[int] = None
        self.left = 0.0
        self.width = 0.0

    def set_bounds(self, left: float, width: float) -> None:
        self.left = left
        self.width = width

    def reset(self, initial: float = 0.5) -> None:
        self.position = clamp01(initial)
        self.dragging = False
        self.pointer_id = None

    def _update(self, client_x: float) -> None:
        if self.width <= 0:
            return
        self.position = clamp01((client_x - self.left) / self.width)

    def hits_handle(self, client_x: float, tolerance: float = 1.0) -> bool:
        if self.width <= 0:
            return False
        handle_x = self.left + self.position * self.width
        return abs(client_x - handle_x) <= tolerance

    def begin(self, pointer_id: int, client_x: float) -> None:
        self.pointer_id = pointer_id
        self.dragging = True
        self._update(client_x)

    def move(self, pointer_id: int, client_x: float) -> bool:
        if not self.dragging or pointer_id != self.pointer_id:
            return False
        self._update(client_x)
        return True

    def end(self, pointer_id: int) -> bool:
        """Returns True when the caller should release its pointer capture."""
        if self.pointer_id is None or pointer_id != self.pointer_id:
            return False
        self.pointer_id = None
        self.dragging = False
        return True

    @property
    def clip_percent(self) -> float:
        return (1 - self.position) * 100

    @property
    def handle_percent(self) -> float:
        return self.position * 100
