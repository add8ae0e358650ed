# services/typing_engine.py
from dataclasses import dataclass
import logging

from PySide6.QtCore import QObject, Signal

from app.config import SPACE_STAND_IN
from app.state import CharacterTrack

log = logging.getLogger(__name__)

_SPACE_KEYS = {" ", "Space", "Spacebar", SPACE_STAND_IN}


@dataclass(frozen=True)
class CharTyped:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class TimerTick:
    pass


def key_to_event(key: str):
    """Map a browser-style key name to a logical event, or None for ignored keys."""
    if not key:
        return None
    if key == "Backspace":
        return Backspace()
    if key in _SPACE_KEYS:
        return CharTyped(" ")
    if len(key) == 1 and key.isprintable():
        return CharTyped(key)
    return None


class TypingEngine(QObject):
    """The only entry point that mutates a CharacterTrack."""

    started = Signal()    # first accepted keystroke of the session
    completed = Signal()  # cursor reached the end of the text
    changed = Signal()    # after every accepted mutation

    def __init__(self, track: CharacterTrack, parent=None):
        super().__init__(parent)
        self.track = track
        self._started = False
        self._complete = False

    @property
    def is_complete(self) -> bool:
        return self._complete

    def mark_complete(self):
        self._complete = True

    def on_key_down(self, key: str) -> bool:
        event = key_to_event(key)
        if event is None:
            return False
        return self.handle_event(event)

    def handle_event(self, event) -> bool:
        if isinstance(event, CharTyped):
            return self.type_char(event.char)
        if isinstance(event, Backspace):
            return self.backspace()
        return False

    def type_char(self, ch: str) -> bool:
        if self._complete or len(ch) != 1 or not ch.isprintable():
            return False
        if not self._started:
            self._started = True
            log.debug("session started")
            self.started.emit()
        done = self.track.advance(ch)
        self.changed.emit()
        if done:
            self._complete = True
            log.debug("text finished at cursor %d", self.track.cursor)
            self.completed.emit()
        return True

    def backspace(self) -> bool:
        if self._complete or self.track.cursor == 0:
            return False
        self.track.undo()
        self.changed.emit()
        return True
