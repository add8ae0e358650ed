from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from app.config import SPACE_STAND_IN
from app.errors import InvalidInput, OutOfRange


class CharStatus(Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass
class CharEntry:
    expected: str
    status: CharStatus = CharStatus.PENDING
    typed: str = ""


@dataclass(frozen=True)
class TrackSnapshot:
    """Read-only view of a CharacterTrack, for stats and rendering."""
    target_text: str
    entries: Tuple[CharEntry, ...]
    cursor: int
    error_tally: int

    @property
    def length(self) -> int:
        return len(self.target_text)

    @property
    def complete(self) -> bool:
        return self.cursor == self.length

    @property
    def correct_count(self) -> int:
        return sum(1 for e in self.entries if e.status is CharStatus.CORRECT)

    @property
    def incorrect_count(self) -> int:
        return sum(1 for e in self.entries if e.status is CharStatus.INCORRECT)


def normalize_char(ch: str) -> str:
    return " " if ch == SPACE_STAND_IN else ch


class CharacterTrack:
    """
    Per-character ledger over the target text.
    Entries before `cursor` are correct or incorrect, the rest are pending.
    `error_tally` counts every miss and is never decremented by undo.
    """

    def __init__(self, text: str):
        self.initialize(text)

    def initialize(self, text: str):
        if not text:
            raise InvalidInput("target text must not be empty")
        self.target_text = text
        self.entries: List[CharEntry] = [CharEntry(ch) for ch in text]
        self.cursor = 0
        self.error_tally = 0
        self.finalized = False

    def __len__(self) -> int:
        return len(self.target_text)

    @property
    def complete(self) -> bool:
        return self.cursor == len(self.target_text)

    @property
    def current(self) -> Optional[CharEntry]:
        if self.complete:
            return None
        return self.entries[self.cursor]

    def advance(self, typed_char: str) -> bool:
        if self.finalized or self.cursor >= len(self.target_text):
            raise OutOfRange(f"cannot advance past {self.cursor}")
        ch = normalize_char(typed_char)
        entry = self.entries[self.cursor]
        entry.typed = ch
        if ch == entry.expected:
            entry.status = CharStatus.CORRECT
        else:
            entry.status = CharStatus.INCORRECT
            self.error_tally += 1
        self.cursor += 1
        return self.complete

    def undo(self):
        if self.finalized or self.cursor <= 0:
            raise OutOfRange(f"cannot undo at {self.cursor}")
        self.cursor -= 1
        entry = self.entries[self.cursor]
        entry.status = CharStatus.PENDING
        entry.typed = ""

    def finalize(self):
        self.finalized = True

    def snapshot(self) -> TrackSnapshot:
        return TrackSnapshot(
            target_text=self.target_text,
            entries=tuple(CharEntry(e.expected, e.status, e.typed) for e in self.entries),
            cursor=self.cursor,
            error_tally=self.error_tally,
        )
