# core/chrono.py
from enum import Enum
import logging

from PySide6.QtCore import QObject, QTimer, Signal

from app.config import SUPPORTED_MODES, TICK_MS
from app.errors import InvalidInput

log = logging.getLogger(__name__)


class TimerPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"


class SessionTimer(QObject):
    """Countdown for one session. Starts on the first keystroke, ticks once a second."""

    remainingChanged = Signal(int)  # whole seconds left
    expired = Signal()              # only when the countdown itself reaches zero

    def __init__(self, mode: int, tick_ms: int = TICK_MS, parent=None):
        super().__init__(parent)
        if mode not in SUPPORTED_MODES:
            raise InvalidInput(f"unsupported mode: {mode!r}")
        self.mode = mode
        self.remaining = mode
        self.phase = TimerPhase.IDLE

        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self.tick)

    @property
    def is_running(self) -> bool:
        return self.phase is TimerPhase.RUNNING

    def start(self) -> bool:
        if self.phase is not TimerPhase.IDLE:
            return False
        self.phase = TimerPhase.RUNNING
        self._tick.start()
        log.debug("timer started at %ds", self.remaining)
        return True

    def tick(self):
        if self.phase is not TimerPhase.RUNNING:
            return
        self.remaining = max(0, self.remaining - 1)
        self.remainingChanged.emit(self.remaining)
        if self.remaining == 0:
            self.phase = TimerPhase.EXPIRED
            self.stop()
            log.info("time expired after %ds", self.mode)
            self.expired.emit()

    def force_complete(self):
        """Text finished before the countdown: freeze with the current remaining value."""
        if self.phase is TimerPhase.RUNNING:
            self.phase = TimerPhase.EXPIRED
            self.stop()

    def stop(self):
        self._tick.stop()

    def elapsed_seconds(self) -> int:
        return self.mode - self.remaining
