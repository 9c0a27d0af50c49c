from __future__ import annotations
import random
import string
from typing import Awaitable, Callable, Tuple

from ..utils import clamp as _clamp, random_uniform as _rand
from .config import kcfg
from .telemetry import KeystrokeRecorder

SleepFn = Callable[[float], Awaitable[None]]

_PUNCTUATION = frozenset(string.punctuation)


def _is_punct(ch: str) -> bool:
    return ch in _PUNCTUATION


class _Pacer:
    """Computes human-plausible pauses and performs them through ``sleep``.

    All randomness comes from ``rng`` so a seeded session replays the same
    cadence; every pause is logged to the recorder with a tag.
    """

    def __init__(
        self,
        rng: random.Random,
        sleep: SleepFn,
        recorder: KeystrokeRecorder,
        jitter: float = kcfg.JITTER_FRAC,
    ):
        self.rng = rng
        self._sleep = sleep
        self.recorder = recorder
        self.jitter = _clamp(jitter, *kcfg.JITTER_FRAC_RANGE)
        self.elapsed = 0.0  # total time we've paused

    def jittered(self, base: float) -> float:
        dt = base * (1.0 + self.rng.uniform(-self.jitter, self.jitter))
        return max(kcfg.GLOBAL_MIN_INTERVAL_S, dt)

    def char_delay(self, ch: str) -> float:
        base = kcfg.CHAR_DELAY_S
        if ch.isspace():
            base *= kcfg.SPACE_FACTOR
        elif _is_punct(ch):
            base *= kcfg.PUNCT_FACTOR
        return self.jittered(base)

    def newline_delay(self) -> float:
        return self.jittered(kcfg.NEWLINE_DELAY_S)

    def draw(self, bounds: Tuple[float, float]) -> float:
        return _rand(*bounds, rng=self.rng)

    async def sleep(self, dt: float, tag: str) -> None:
        dt = max(0.0, dt)
        self.recorder.log("pause", tag, dt)
        await self._sleep(dt)
        self.elapsed += dt

    async def hold(self, bounds: Tuple[float, float], tag: str) -> None:
        await self.sleep(self.draw(bounds), tag)
