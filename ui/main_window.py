# ui/main_window.py
from typing import Dict, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QButtonGroup
)
from PySide6.QtCore import Qt, QTimer, Slot

from app.calculation import SessionResult
from app.config import SUPPORTED_MODES
from services.mode_controller import ModeController
from services.text_provider import TargetTextProvider
from ui.session_summary import SessionSummary
from ui.typing_view import TypingView
from utils.db_helper import PersonalBestsStore


_QSS = """
QWidget { background: #0f1115; color: #e5e7eb; }
QLabel#appTitle { font-size: 28px; color: #eab308; }
QLabel#cursorBlink { font-size: 28px; color: #eab308; }
QLabel#lblWPM { font-size: 32px; color: #eab308; }
QLabel#lblAcc, QLabel#lblTimer, QLabel#lblErrors { font-size: 32px; }
QLabel#statCaption, QLabel#footer { color: #6b7280; }
QPushButton#modeBtn, QPushButton#TopBtn {
    background: transparent;
    border: 1px solid rgba(255,255,255,0.10);
    border-radius: 9px;
    padding: 6px 12px;
}
QPushButton#modeBtn:checked { border-color: #eab308; color: #eab308; }
QFrame#resultsOverlay {
    background: rgba(255,255,255,0.04);
    border: 1px solid rgba(255,255,255,0.08);
    border-radius: 14px;
}
"""


def _fmt_best(wpm: Optional[int]) -> str:
    return "–" if wpm is None else f"{wpm} wpm"


class MainWindow(QMainWindow):
    def __init__(self, controller: Optional[ModeController] = None):
        super().__init__()
        self.setWindowTitle("Typing Speed Test")
        self.resize(1100, 760)
        self.controller = controller or ModeController(
            TargetTextProvider(), PersonalBestsStore(), parent=self
        )

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(24, 24, 24, 16)
        root_v.setSpacing(20)

        self._build_header(root_v)
        self._build_mode_bar(root_v)

        self.view = TypingView(self.controller, root)
        root_v.addWidget(self.view, 1)

        self._build_actions(root_v)

        self.summary = SessionSummary(root)
        self.summary.restartRequested.connect(self._restart)
        self.summary.newTextRequested.connect(self._new_text)
        root_v.addWidget(self.summary, 1)

        self._build_bests(root_v)

        footer = QLabel("built with pixels and patience", root)
        footer.setObjectName("footer")
        footer.setAlignment(Qt.AlignCenter)
        root_v.addWidget(footer)

        self.setCentralWidget(root)
        self.setStyleSheet(_QSS)

        self.controller.finished.connect(self._on_finished)
        self.controller.bestsChanged.connect(self._refresh_bests)
        self.controller.reset.connect(self.summary.clear)
        self.controller.reset.connect(lambda: self.setWindowTitle("Typing Speed Test"))

        self.view.setFocus()

    # ---------------- Header ----------------
    def _build_header(self, parent_layout):
        h = QHBoxLayout()
        title = QLabel("typing test", self)
        title.setObjectName("appTitle")
        self.cursor_blink = QLabel("_", self)
        self.cursor_blink.setObjectName("cursorBlink")
        h.addWidget(title)
        h.addWidget(self.cursor_blink)
        h.addStretch(1)
        parent_layout.addLayout(h)

        self._blink_timer = QTimer(self)
        self._blink_timer.setInterval(530)
        self._blink_timer.timeout.connect(
            lambda: self.cursor_blink.setText("_" if self.cursor_blink.text() == " " else " ")
        )
        self._blink_timer.start()

    # ---------------- Modes ----------------
    def _build_mode_bar(self, parent_layout):
        h = QHBoxLayout()
        h.addStretch(1)
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_buttons: Dict[int, QPushButton] = {}
        for mode in SUPPORTED_MODES:
            btn = QPushButton(f"{mode}s", self)
            btn.setObjectName("modeBtn")
            btn.setCheckable(True)
            btn.setFocusPolicy(Qt.NoFocus)
            btn.clicked.connect(lambda _=False, m=mode: self._select_mode(m))
            self.mode_group.addButton(btn)
            self.mode_buttons[mode] = btn
            h.addWidget(btn)
        h.addStretch(1)
        parent_layout.addLayout(h)
        self._sync_mode_buttons()

    def _sync_mode_buttons(self):
        for mode, btn in self.mode_buttons.items():
            active = mode == self.controller.mode
            btn.setChecked(active)
            btn.setAccessibleDescription("pressed" if active else "not pressed")

    def _select_mode(self, mode: int):
        self.controller.select_mode(mode)
        self._sync_mode_buttons()
        self.view.setFocus()

    # ---------------- Actions ----------------
    def _build_actions(self, parent_layout):
        h = QHBoxLayout()
        h.addStretch(1)
        self.btn_restart = QPushButton("restart", self)
        self.btn_restart.setObjectName("TopBtn")
        self.btn_restart.setFocusPolicy(Qt.NoFocus)
        self.btn_restart.clicked.connect(self._restart)
        self.btn_new_text = QPushButton("new text", self)
        self.btn_new_text.setObjectName("TopBtn")
        self.btn_new_text.setFocusPolicy(Qt.NoFocus)
        self.btn_new_text.clicked.connect(self._new_text)
        h.addWidget(self.btn_restart)
        h.addWidget(self.btn_new_text)
        h.addStretch(1)
        parent_layout.addLayout(h)

    def _restart(self):
        self.controller.restart()
        self.view.setFocus()

    def _new_text(self):
        self.controller.load_new_text()
        self.view.setFocus()

    # ---------------- Personal bests ----------------
    def _build_bests(self, parent_layout):
        box = QVBoxLayout()
        heading = QLabel("personal bests", self)
        heading.setObjectName("bestsHeading")
        box.addWidget(heading)
        grid = QGridLayout()
        self.best_labels: Dict[int, QLabel] = {}
        for col, mode in enumerate(SUPPORTED_MODES):
            cap = QLabel(f"{mode}s", self)
            cap.setAlignment(Qt.AlignCenter)
            val = QLabel("", self)
            val.setAlignment(Qt.AlignCenter)
            grid.addWidget(cap, 0, col)
            grid.addWidget(val, 1, col)
            self.best_labels[mode] = val
        box.addLayout(grid)
        parent_layout.addLayout(box)
        self._refresh_bests(self.controller.personal_bests())

    @Slot(object)
    def _refresh_bests(self, bests: dict):
        for mode, lab in self.best_labels.items():
            lab.setText(_fmt_best(bests.get(mode)))

    # ---------------- Results ----------------
    def _on_finished(self, result: SessionResult, new_best: bool):
        self.summary.show_result(
            result, new_best, self.controller.wpm_history,
            self.controller.personal_bests().get(result.mode),
        )
        title = f"Typing Speed Test — {result.wpm} WPM"
        if new_best:
            title += " (new best)"
        self.setWindowTitle(title)
