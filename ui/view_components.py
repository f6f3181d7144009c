from dataclasses import dataclass
from typing import Optional, Tuple


# ---------- Drag tracking ----------
@dataclass
class DragTracker:
    """
    Turns a stream of mouse positions into integer pixel offsets between
    consecutive events while a drag is active.
    """
    _active: bool = False
    _last_x: int = 0
    _last_y: int = 0

    @property
    def active(self) -> bool:
        return self._active

    def begin(self, x: int, y: int) -> None:
        self._active = True
        self._last_x, self._last_y = int(x), int(y)

    def end(self) -> None:
        self._active = False

    def update(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """Offset since the previous position, or None when not dragging."""
        if not self._active:
            return None
        x, y = int(x), int(y)
        shift = (x - self._last_x, y - self._last_y)
        self._last_x, self._last_y = x, y
        return shift
