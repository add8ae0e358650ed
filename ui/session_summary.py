# ui/session_summary.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QVBoxLayout, QHBoxLayout, QLabel, QPushButton
import pyqtgraph as pg

from app.calculation import SessionResult
from utils.graph_helper import build_wpm_chart, show_session


class SessionSummary(QFrame):
    """
    Results panel shown over the test once a session finishes.
    Final stats plus a WPM-over-time graph sampled on each timer tick.
    """

    restartRequested = Signal()
    newTextRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("resultsOverlay")

        root = QVBoxLayout(self)
        root.setSpacing(12)

        self.lblTitle = QLabel("results", self)
        self.lblTitle.setObjectName("resultsTitle")
        self.lblBest = QLabel("new personal best!", self)
        self.lblBest.setObjectName("resultsBest")
        self.lblBest.setVisible(False)
        root.addWidget(self.lblTitle)
        root.addWidget(self.lblBest)

        row = QHBoxLayout()
        self.lblWPM = QLabel("0", self)
        self.lblAcc = QLabel("100%", self)
        self.lblChars = QLabel("0", self)
        self.lblErrors = QLabel("0", self)
        for caption, lab in (("wpm", self.lblWPM), ("accuracy", self.lblAcc),
                             ("characters", self.lblChars), ("errors", self.lblErrors)):
            col = QVBoxLayout()
            lab.setAlignment(Qt.AlignCenter)
            cap = QLabel(caption, self)
            cap.setAlignment(Qt.AlignCenter)
            col.addWidget(lab)
            col.addWidget(cap)
            row.addLayout(col)
        root.addLayout(row)

        self.plot = pg.PlotWidget()
        self._curve, self._best_line = build_wpm_chart(self.plot, "#eab308", "#6b7280")
        root.addWidget(self.plot, stretch=1)

        buttons = QHBoxLayout()
        btn_restart = QPushButton("try again", self)
        btn_restart.setFocusPolicy(Qt.NoFocus)
        btn_restart.clicked.connect(lambda: self.restartRequested.emit())
        btn_new = QPushButton("new text", self)
        btn_new.setFocusPolicy(Qt.NoFocus)
        btn_new.clicked.connect(lambda: self.newTextRequested.emit())
        buttons.addWidget(btn_restart)
        buttons.addWidget(btn_new)
        root.addLayout(buttons)

        self.setVisible(False)

    def show_result(self, result: SessionResult, new_best: bool,
                    history: Sequence[Tuple[int, int]] = (), best: Optional[int] = None):
        self.lblWPM.setText(str(result.wpm))
        self.lblAcc.setText(f"{result.accuracy}%")
        self.lblChars.setText(str(result.total_chars))
        self.lblErrors.setText(str(result.errors))
        self.lblBest.setVisible(new_best)

        show_session(self._curve, self._best_line, history, best)
        self.setVisible(True)

    def clear(self):
        self._curve.setData([], [])
        self._best_line.setVisible(False)
        self.lblBest.setVisible(False)
        self.setVisible(False)
