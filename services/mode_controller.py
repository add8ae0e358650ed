# services/mode_controller.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from app.calculation import LiveStats, SessionResult, StatsCalculator
from app.config import DEFAULT_MODE, SUPPORTED_MODES
from app.errors import InvalidInput, StorageError
from app.state import CharacterTrack, TrackSnapshot
from core.chrono import SessionTimer, TimerPhase
from services.text_provider import TargetTextProvider
from services.typing_engine import TimerTick, TypingEngine
from utils.db_helper import PersonalBestsStore

log = logging.getLogger(__name__)


class ModeController(QObject):
    """
    Owns the current session: track, engine, timer and final result.
    Every reset path tears down the previous timer before building a new one.
    """

    reset = Signal()
    statsChanged = Signal(object)        # LiveStats
    remainingChanged = Signal(int)
    finished = Signal(object, bool)      # SessionResult, new personal best
    bestsChanged = Signal(object)        # {mode: best wpm or None}

    def __init__(
        self,
        provider: TargetTextProvider,
        bests: PersonalBestsStore,
        calculator: Optional[StatsCalculator] = None,
        mode: int = DEFAULT_MODE,
        parent=None,
    ):
        super().__init__(parent)
        if mode not in SUPPORTED_MODES:
            raise InvalidInput(f"unsupported mode: {mode!r}")
        self.provider = provider
        self.bests = bests
        self.calculator = calculator or StatsCalculator()
        self._mode = mode
        self._text = provider.next()
        self._best_cache = self._load_bests()

        self.track: Optional[CharacterTrack] = None
        self.engine: Optional[TypingEngine] = None
        self.timer: Optional[SessionTimer] = None
        self._result: Optional[SessionResult] = None
        self._new_best = False
        self.wpm_history: List[Tuple[int, int]] = []
        self._reset_session()

    # ---------------- Queries ----------------
    @property
    def mode(self) -> int:
        return self._mode

    @property
    def target_text(self) -> str:
        return self._text

    @property
    def remaining(self) -> int:
        return self.timer.remaining

    @property
    def phase(self) -> TimerPhase:
        return self.timer.phase

    @property
    def is_complete(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[SessionResult]:
        return self._result

    @property
    def new_best(self) -> bool:
        return self._new_best

    def snapshot(self) -> TrackSnapshot:
        return self.track.snapshot()

    def live_stats(self) -> LiveStats:
        return self.calculator.live(self.track.snapshot(), self.timer.elapsed_seconds())

    def personal_bests(self) -> Dict[int, Optional[int]]:
        return dict(self._best_cache)

    # ---------------- Commands ----------------
    def select_mode(self, duration: int):
        if duration not in SUPPORTED_MODES:
            raise InvalidInput(f"unsupported mode: {duration!r}")
        log.info("Mode %ds selected", duration)
        self._mode = duration
        self._reset_session()

    def restart(self):
        self._reset_session()

    def load_new_text(self):
        self._text = self.provider.next(excluding=self._text)
        self._reset_session()

    def handle_typed_char(self, ch: str) -> bool:
        return self.engine.type_char(ch)

    def handle_backspace(self) -> bool:
        return self.engine.backspace()

    def handle_key(self, key: str) -> bool:
        return self.engine.on_key_down(key)

    def handle_event(self, event) -> bool:
        if isinstance(event, TimerTick):
            if not self.timer.is_running:
                return False
            self.timer.tick()
            return True
        return self.engine.handle_event(event)

    # ---------------- Session lifecycle ----------------
    def _teardown(self):
        if self.timer is not None:
            self.timer.stop()
            self.timer.blockSignals(True)
            self.timer.deleteLater()
            self.timer = None
        if self.engine is not None:
            self.engine.blockSignals(True)
            self.engine.deleteLater()
            self.engine = None

    def _reset_session(self):
        self._teardown()
        self.track = CharacterTrack(self._text)

        self.engine = TypingEngine(self.track, self)
        self.engine.started.connect(self._on_started)
        self.engine.changed.connect(self._emit_stats)
        self.engine.completed.connect(self.on_session_completed)

        self.timer = SessionTimer(self._mode, parent=self)
        self.timer.remainingChanged.connect(self._on_tick)
        self.timer.expired.connect(self._on_expired)

        self._result = None
        self._new_best = False
        self.wpm_history = []

        self.reset.emit()
        self.remainingChanged.emit(self.timer.remaining)
        self._emit_stats()

    def _on_started(self):
        log.info("Session started (%ds, %d chars)", self._mode, len(self._text))
        self.timer.start()

    def _on_tick(self, remaining: int):
        stats = self.live_stats()
        self.wpm_history.append((self.timer.elapsed_seconds(), stats.wpm))
        self.remainingChanged.emit(remaining)
        self.statsChanged.emit(stats)

    def _on_expired(self):
        self.engine.mark_complete()
        self.on_session_completed()

    def _emit_stats(self):
        self.statsChanged.emit(self.live_stats())

    def on_session_completed(self):
        if self._result is not None:
            return
        self.timer.force_complete()
        self.track.finalize()
        self.engine.mark_complete()

        result = self.calculator.compute_result(
            self.track.snapshot(), self.timer.elapsed_seconds(), self._mode
        )
        self._result = result
        log.info(
            "Session finished: %d wpm, %d%% accuracy, %d chars, %d errors in %ds",
            result.wpm, result.accuracy, result.total_chars, result.errors,
            result.elapsed_seconds,
        )

        try:
            self._new_best = self.bests.record_if_better(self._mode, result.wpm)
        except StorageError:
            log.exception("Could not update personal best for %ds mode", self._mode)
            self._new_best = False
        try:
            self.bests.insert_result(result)
        except StorageError:
            log.exception("Could not save result history for %ds mode", self._mode)

        if self._new_best:
            self._best_cache[self._mode] = result.wpm
            self.bestsChanged.emit(self.personal_bests())
        self.statsChanged.emit(self.live_stats())
        self.finished.emit(result, self._new_best)

    def _load_bests(self) -> Dict[int, Optional[int]]:
        try:
            return self.bests.load()
        except StorageError:
            log.exception("Could not load personal bests")
            return {m: None for m in SUPPORTED_MODES}
