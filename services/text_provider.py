# services/text_provider.py
import random
from typing import Optional, Sequence

from app.errors import InvalidInput
from utils.file_handler import load_passages


class TargetTextProvider:
    """Picks passages from a fixed corpus."""

    def __init__(self, corpus: Optional[Sequence[str]] = None, rng: Optional[random.Random] = None):
        passages = list(corpus) if corpus is not None else load_passages()
        passages = [p for p in passages if p]
        if not passages:
            raise InvalidInput("text corpus is empty")
        self.corpus = passages
        self.rng = rng or random.Random()

    def next(self, excluding: Optional[str] = None) -> str:
        pool = [p for p in self.corpus if p != excluding]
        # single-passage corpus: repeating is unavoidable
        if not pool:
            pool = self.corpus
        return self.rng.choice(pool)
