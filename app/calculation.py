from dataclasses import dataclass
from typing import List, Sequence, Tuple
import math

from app.config import CHARS_PER_WORD, COUNT_CORRECTED_ERRORS
from app.state import TrackSnapshot


@dataclass(frozen=True)
class LiveStats:
    wpm: int = 0
    accuracy: int = 100
    errors: int = 0


@dataclass(frozen=True)
class SessionResult:
    wpm: int
    accuracy: int
    total_chars: int
    errors: int
    correct_chars: int
    elapsed_seconds: int
    mode: int


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_wpm(correct_chars: int, elapsed_seconds: float) -> int:
    # WPM = (correct_chars / 5) / (elapsed minutes)
    if elapsed_seconds <= 0:
        return 0
    return round_half_up((correct_chars / CHARS_PER_WORD) / (elapsed_seconds / 60.0))


def compute_accuracy(typed: int, errors: int) -> int:
    if typed <= 0:
        return 100
    pct = round_half_up(100.0 * (typed - errors) / typed)
    return max(0, min(100, pct))


class StatsCalculator:
    """
    Derives live stats and the final result from a track snapshot plus a timer.
    With count_corrected_errors (default) an error stays counted after undo.
    """

    def __init__(self, count_corrected_errors: bool = COUNT_CORRECTED_ERRORS):
        self.count_corrected_errors = count_corrected_errors

    def errors(self, snap: TrackSnapshot) -> int:
        if self.count_corrected_errors:
            return snap.error_tally
        return snap.incorrect_count

    def live(self, snap: TrackSnapshot, elapsed_seconds: int) -> LiveStats:
        errors = self.errors(snap)
        return LiveStats(
            wpm=compute_wpm(snap.correct_count, elapsed_seconds),
            accuracy=compute_accuracy(snap.cursor, errors),
            errors=errors,
        )

    def compute_result(self, snap: TrackSnapshot, elapsed_seconds: int, mode: int) -> SessionResult:
        errors = self.errors(snap)
        correct = snap.correct_count
        return SessionResult(
            wpm=compute_wpm(correct, elapsed_seconds),
            accuracy=compute_accuracy(snap.cursor, errors),
            total_chars=snap.cursor,
            errors=errors,
            correct_chars=correct,
            elapsed_seconds=elapsed_seconds,
            mode=mode,
        )


def smooth_history(history: Sequence[Tuple[int, int]], factor: float = 0.25) -> List[Tuple[int, float]]:
    """Exponential moving average over per-tick (elapsed, wpm) samples."""
    smoothed: List[Tuple[int, float]] = []
    for elapsed, wpm in history:
        prev = smoothed[-1][1] if smoothed else float(wpm)
        smoothed.append((elapsed, prev + factor * (wpm - prev)))
    return smoothed
