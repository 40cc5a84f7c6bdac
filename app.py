import sys, asyncio, logging
from typing import Dict, List, Optional

from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtCore import Qt
import aiohttp
from qasync import QEventLoop

from config_store import load_symbols_or_default
from log_setup import LOGGER_NAME, setup_logging
from quotes import LOADING_TEXT, BinanceFetcher, QuoteResult, display_rows, refresh_all
from scheduler import REFRESH_INTERVAL_SEC, RefreshTimer
from ui_style import DEFAULT_TEXT_RGB, RGB, invert_rgb, label_style

APP_NAME = "PriceTrack"

log = logging.getLogger(LOGGER_NAME)


# ---------- Price overlay ----------
class PriceWidget(QtWidgets.QWidget):
    def __init__(self, symbols: List[str], parent=None):
        super().__init__(parent)
        self.symbols = list(symbols)
        self.setWindowTitle(APP_NAME)
        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_X11NetWmWindowTypeDock, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)

        self.color: RGB = DEFAULT_TEXT_RGB
        self._drag_pos: Optional[QtCore.QPoint] = None

        v = QtWidgets.QVBoxLayout(self)
        self.labels: List[QtWidgets.QLabel] = []
        for _ in self.symbols:  # one row per entry, duplicates included
            lab = QtWidgets.QLabel(LOADING_TEXT)
            v.addWidget(lab)
            self.labels.append(lab)
        self._apply_style()

    def _apply_style(self):
        ss = label_style(self.color)
        for lab in self.labels:
            lab.setStyleSheet(ss)

    def apply_cycle(self, output: Dict[str, QuoteResult]):
        for lab, text in zip(self.labels, display_rows(self.symbols, output)):
            lab.setText(text)
            lab.adjustSize()
        self.adjustSize()

    def toggle_color(self):
        self.color = invert_rgb(self.color)
        self._apply_style()

    def mousePressEvent(self, e: QtGui.QMouseEvent):
        self._drag_pos = e.globalPosition().toPoint()

    def mouseMoveEvent(self, e: QtGui.QMouseEvent):
        if self._drag_pos is None:
            return
        pos = e.globalPosition().toPoint()
        self.move(self.pos() + (pos - self._drag_pos))
        self._drag_pos = pos

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent):
        self._drag_pos = None

    def contextMenuEvent(self, e: QtGui.QContextMenuEvent):
        self.toggle_color()


# ---------- Controller ----------
class Controller(QtCore.QObject):
    def __init__(self, symbols: List[str]):
        super().__init__()
        self.symbols = symbols
        self.widget = PriceWidget(symbols)
        self.session: Optional[aiohttp.ClientSession] = None
        self.timer = RefreshTimer(self.refresh, REFRESH_INTERVAL_SEC)

    def _ensure_session(self):
        if self.session is None or getattr(self.session, "closed", False):
            self.session = aiohttp.ClientSession(headers={
                "Accept":"application/json",
                "Cache-Control":"no-cache",
                "Pragma":"no-cache"
            })

    async def refresh(self):
        self._ensure_session()
        output = await refresh_all(self.symbols, BinanceFetcher(self.session))
        # rendering stays on the Qt thread, after the whole cycle is in
        self.widget.apply_cycle(output)

    def start(self):
        self.widget.show()
        self.timer.start()
        log.info("Tracking %d symbol(s): %s", len(self.symbols), ", ".join(self.symbols))

    async def shutdown(self):
        self.timer.stop()
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None


# ---------- Boot ----------
def main():
    setup_logging()
    symbols = load_symbols_or_default()
    if not symbols:
        log.critical("No symbols to track, exiting.")
        sys.exit(1)

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_NAME)

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    ctrl = Controller(symbols)
    app.aboutToQuit.connect(loop.stop)
    with loop:
        ctrl.start()
        loop.run_forever()
        loop.run_until_complete(ctrl.shutdown())

if __name__ == "__main__":
    main()
