from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional

from .config import kcfg

# =========================================================
# QWERTY adjacency for plausible slips (letters only)
# =========================================================

_KEY_NEIGHBORS = {
    "a": "qwsz",
    "b": "vghn",
    "c": "xdfv",
    "d": "serfcx",
    "e": "wsdr",
    "f": "drtgvc",
    "g": "ftyhbv",
    "h": "gyujnb",
    "i": "ujko",
    "j": "huikmn",
    "k": "jiolm",
    "l": "kop",
    "m": "njk",
    "n": "bhjm",
    "o": "iklp",
    "p": "ol",
    "q": "wa",
    "r": "edft",
    "s": "awedxz",
    "t": "rfgy",
    "u": "yhji",
    "v": "cfgb",
    "w": "qase",
    "x": "zsdc",
    "y": "tghu",
    "z": "asx",
}


@dataclass(frozen=True)
class TypoDecision:
    inject: bool
    substitute: Optional[str] = None


_NO_TYPO = TypoDecision(False)


class TypoModel:
    """Decides, per character, whether to slip onto a neighboring key first.

    Each call draws once from the generator, so decisions are independent
    across characters and reproducible under a seeded ``rng``.
    """

    def __init__(
        self,
        probability: float = kcfg.TYPO_RATE,
        rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"typo probability must be in [0, 1], got {probability!r}")
        self.probability = probability
        self.rng = rng or random.Random()

    def decide(self, ch: str) -> TypoDecision:
        fires = self.rng.random() < self.probability
        if not fires or len(ch) != 1 or not ch.isalpha():
            return _NO_TYPO
        neighbors = _KEY_NEIGHBORS.get(ch.lower())
        if not neighbors:
            return _NO_TYPO
        wrong = self.rng.choice(neighbors)
        return TypoDecision(True, wrong.upper() if ch.isupper() else wrong)
