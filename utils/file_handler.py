import logging
import os
from pathlib import Path
from typing import List

from app.config import PASSAGES_FILE

log = logging.getLogger(__name__)

PASSAGES: List[str] = [
    "The quick brown fox jumps over the lazy dog while the sun sets slowly behind "
    "the distant hills and the evening air grows cool.",
    "Practice does not make perfect, it makes permanent. Slow down, type each "
    "letter with care, and speed will follow once accuracy becomes a habit.",
    "A small river ran through the village, carrying leaves and stories from the "
    "mountains to the sea, and nobody ever asked where it was going.",
    "Good software is written twice: once to find out what the problem is, and "
    "once more to solve it in a way that others can read and change.",
    "The library was quiet except for the soft turning of pages and the distant "
    "hum of an old radiator that had outlived three generations of readers.",
    "Every morning she walked to the harbor, counted the boats that had come in "
    "overnight, and wrote their names in a notebook she kept in her coat.",
]


def _split_blocks(txt: str) -> List[str]:
    blocks = []
    for b in txt.replace("\r\n", "\n").split("\n\n"):
        b = " ".join(b.split())
        if b:
            blocks.append(b)
    return blocks


def load_passages(path: str = PASSAGES_FILE) -> List[str]:
    """Passages from the text file (blank-line separated), else the built-in list."""
    p = Path(path)
    if p.exists():
        try:
            blocks = _split_blocks(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read passages from %s: %s", p, e)
            blocks = []
        if blocks:
            log.info("Loaded %d passages from %s", len(blocks), p)
            return blocks
    return list(PASSAGES)


def ensure_app_files():
    os.makedirs("data", exist_ok=True)
    os.makedirs(os.path.dirname(PASSAGES_FILE), exist_ok=True)
