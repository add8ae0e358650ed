from __future__ import annotations
import html

from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QSizePolicy

from app.calculation import LiveStats
from app.config import SPACE_STAND_IN
from app.state import CharStatus, TrackSnapshot
from services.mode_controller import ModeController


def _stat_card(parent, object_name: str, caption: str, value: str):
    box = QVBoxLayout()
    box.setSpacing(2)
    val = QLabel(value, parent)
    val.setObjectName(object_name)
    val.setAlignment(Qt.AlignCenter)
    cap = QLabel(caption, parent)
    cap.setObjectName("statCaption")
    cap.setAlignment(Qt.AlignCenter)
    box.addWidget(val)
    box.addWidget(cap)
    return box, val


def normalize_key(ev) -> str | None:
    """Qt key event -> browser-style key name understood by the engine."""
    if ev.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
        return None
    if ev.key() == Qt.Key_Backspace:
        return "Backspace"
    t = ev.text()
    if len(t) == 1 and t.isprintable():
        return t
    return None


class TypingView(QWidget):
    """Stat cards plus the character-by-character text display."""

    def __init__(self, controller: ModeController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setFocusPolicy(Qt.StrongFocus)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 20, 0, 20)
        root.setSpacing(28)

        stats = QHBoxLayout()
        stats.setSpacing(40)
        box, self.lblWPM = _stat_card(self, "lblWPM", "wpm", "0")
        stats.addLayout(box)
        box, self.lblAcc = _stat_card(self, "lblAcc", "accuracy", "100%")
        stats.addLayout(box)
        box, self.lblTimer = _stat_card(self, "lblTimer", "time", str(controller.remaining))
        stats.addLayout(box)
        box, self.lblErrors = _stat_card(self, "lblErrors", "errors", "0")
        stats.addLayout(box)
        root.addLayout(stats)

        self.lblLine = QLabel("", self)
        self.lblLine.setObjectName("lblLine")
        self.lblLine.setTextFormat(Qt.RichText)
        self.lblLine.setWordWrap(True)
        self.lblLine.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.lblLine.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.lblLine.setMinimumHeight(140)
        self.lblLine.setStyleSheet("font-size: 26px; line-height: 1.4;")
        root.addWidget(self.lblLine, stretch=1)

        self._colors = {
            "ok": "#22c55e",
            "err": "#ef4444",
            "mut": "#6b7280",
            "caret": "#eab308",
        }
        self._caret_on = True
        self._caret_timer = QTimer(self)
        self._caret_timer.setInterval(500)
        self._caret_timer.timeout.connect(self._toggle_caret)
        self._caret_timer.start()

        controller.statsChanged.connect(self.on_stats_changed)
        controller.remainingChanged.connect(self.on_remaining_changed)
        controller.reset.connect(self.render)
        self.render()

    @Slot(object)
    def on_stats_changed(self, stats: LiveStats):
        self.lblWPM.setText(str(stats.wpm))
        self.lblAcc.setText(f"{stats.accuracy}%")
        self.lblErrors.setText(str(stats.errors))
        self.render()

    @Slot(int)
    def on_remaining_changed(self, remaining: int):
        self.lblTimer.setText(str(remaining))

    def _toggle_caret(self):
        self._caret_on = not self._caret_on
        self.render()

    def render(self):
        self.lblLine.setText(self.to_html(self.controller.snapshot()))

    def to_html(self, snap: TrackSnapshot) -> str:
        parts: list[str] = []
        for i, entry in enumerate(snap.entries):
            ch = entry.expected
            txt = "&nbsp;" if ch in (" ", SPACE_STAND_IN) else html.escape(ch)
            if entry.status is CharStatus.CORRECT:
                style = f"color:{self._colors['ok']}"
            elif entry.status is CharStatus.INCORRECT:
                style = f"color:{self._colors['err']}; text-decoration:underline"
            elif i == snap.cursor and self._caret_on:
                style = f"color:{self._colors['caret']}; text-decoration:underline"
            else:
                style = f"color:{self._colors['mut']}"
            parts.append(f'<span class="char" style="{style}">{txt}</span>')
        return "".join(parts)

    def keyPressEvent(self, ev):
        key = normalize_key(ev)
        if key is None:
            return super().keyPressEvent(ev)
        self.controller.handle_key(key)
        self._caret_on = True
        ev.accept()
