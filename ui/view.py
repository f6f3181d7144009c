import numpy as np
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QImage, QKeyEvent, QPainter, QWheelEvent
from PySide6.QtWidgets import QWidget

from rendering.events import FrameEvent, LogEvent
from rendering.service import RenderService
from ui.view_components import DragTracker


# =============================================================================
# Main Window
# =============================================================================
class FractalViewer(QWidget):
    """
    Window surface for a RenderService.

    Controls:
      left drag      pan (only exposed edges are rendered again)
      right click    center the view on the clicked pixel
      middle click   toggle fine controls
      wheel          zoom
      R              reset to the complete frame
      S / Shift+S    save / high resolution save
      Space          pause or resume an animated set
      Enter          step a paused animation (Shift steps backwards)
    """

    # Channels per pixel -> QImage layout
    _QIMAGE_FORMATS = {
        1: QImage.Format.Format_Grayscale8,
        3: QImage.Format.Format_RGB888,
        4: QImage.Format.Format_RGBA8888,
    }

    # ---------- Construction & wiring ----------
    def __init__(self, service: RenderService, title: str = "Juliet", fps: int = 60):
        super().__init__()
        self.setWindowTitle(title)
        width, height = service.resolution()
        self.resize(width, height)
        self.setMouseTracking(False)

        self.service = service
        self.service.on_frame = self._on_frame
        self.service.on_log = self._on_log
        self.view_image: QImage | None = None
        self.drag = DragTracker()
        self._draw_pending = True

        self.timer = QTimer(self)
        self.timer.timeout.connect(self._on_tick)
        self.timer.start(int(1000 / fps))

    # ---------- Service callbacks ----------
    @staticmethod
    def _displayable(data: np.ndarray) -> np.ndarray:
        # Mono buffers hold interior flags; show the interior white.
        if data.dtype == np.bool_:
            return data.astype(np.uint8) * 0xFF
        return data

    def _on_frame(self, evt: FrameEvent) -> None:
        data = np.ascontiguousarray(self._displayable(evt.data))
        fmt = self._QIMAGE_FORMATS[data.shape[2]]
        # QImage does not own the buffer; copy so it outlives the next render.
        self.view_image = QImage(data.data, evt.width, evt.height,
                                 evt.width * data.shape[2], fmt).copy()
        self.update()

    def _on_log(self, evt: LogEvent) -> None:
        self.setWindowTitle(evt.message)

    # ---------- Render loop ----------
    def request_draw(self, needed: bool = True) -> None:
        self._draw_pending = self._draw_pending or needed

    def _on_tick(self) -> None:
        self.request_draw(self.service.tick())
        if self._draw_pending:
            self._draw_pending = False
            self.service.draw()

    def paintEvent(self, event):
        if self.view_image is None:
            return
        painter = QPainter(self)
        painter.drawImage(0, 0, self.view_image)
        painter.end()

    # ---------- Input ----------
    def resizeEvent(self, event):
        size = event.size()
        self.service.resize(max(1, size.width()), max(1, size.height()))
        self.request_draw()
        super().resizeEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta().y()
        if delta == 0:
            return
        if delta > 0:
            self.service.zoom_in()
        else:
            self.service.zoom_out()
        self.request_draw()

    def mousePressEvent(self, event):
        pos = event.position().toPoint()
        if event.button() == Qt.MouseButton.LeftButton:
            self.drag.begin(pos.x(), pos.y())
        elif event.button() == Qt.MouseButton.RightButton:
            self.request_draw(self.service.center_on(pos.x(), pos.y()))
        elif event.button() == Qt.MouseButton.MiddleButton:
            self.service.toggle_fine_controls()

    def mouseMoveEvent(self, event):
        pos = event.position().toPoint()
        shift = self.drag.update(pos.x(), pos.y())
        if shift is None or shift == (0, 0):
            return
        self.request_draw(self.service.translate(*shift))

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.drag.end()

    def keyPressEvent(self, event: QKeyEvent):
        shift = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
        key = event.key()
        if key == Qt.Key.Key_S:
            if shift:
                self.service.high_res_save()
            else:
                self.service.save()
        elif key == Qt.Key.Key_R:
            self.service.reset_frame()
            self.request_draw()
        elif key == Qt.Key.Key_Space:
            self.service.toggle_pause()
        elif key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.request_draw(self.service.step(backward=shift))
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self.timer.stop()
        self.service.close()
        super().closeEvent(event)
