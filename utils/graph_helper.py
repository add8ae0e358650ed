from typing import Optional, Sequence, Tuple
from PySide6.QtCore import Qt
import pyqtgraph as pg

from app.calculation import smooth_history


def build_wpm_chart(plot_widget: pg.PlotWidget, line_color: str, best_color: str):
    """Configure the results chart; returns the WPM curve and the personal-best marker."""
    plot_widget.setBackground(None)
    plot_widget.showGrid(x=False, y=True, alpha=0.08)
    plot_widget.setMenuEnabled(False)
    plot_widget.setMouseEnabled(x=False, y=False)
    plot_widget.hideButtons()
    plot_widget.setLabel("left", "WPM")
    plot_widget.setLabel("bottom", "Time (s)")
    curve = plot_widget.plot([], [], pen=pg.mkPen(line_color, width=2.5), antialias=True)
    best_line = pg.InfiniteLine(angle=0, movable=False,
                                pen=pg.mkPen(best_color, width=1, style=Qt.DashLine))
    best_line.setVisible(False)
    plot_widget.addItem(best_line)
    return curve, best_line


def show_session(curve, best_line, history: Sequence[Tuple[int, int]], best: Optional[int]):
    points = smooth_history(history)
    curve.setData([float(t) for t, _ in points], [w for _, w in points])
    if best:
        best_line.setPos(best)
    best_line.setVisible(bool(best))
