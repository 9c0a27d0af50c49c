from __future__ import annotations
import ctypes
import platform
import random
from typing import Optional


class HiResTimer:
    """Context manager to request 1ms Windows system timer resolution.

    Typing sessions sleep between every keystroke; on Windows this keeps the
    default 15.6ms tick from swallowing short pauses. Elsewhere it is a no-op.
    """

    def __enter__(self):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeBeginPeriod(1)
        return self

    def __exit__(self, exc_type, exc, tb):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeEndPeriod(1)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def random_uniform(a: float, b: float, rng: Optional[random.Random] = None) -> float:
    """Return a random float between a and b, agnostic to order."""
    lo, hi = (a, b) if a <= b else (b, a)
    return (rng or random).uniform(lo, hi)


def leading_width(line: str, tab_size: int = 4) -> int:
    """Width of the leading whitespace of ``line`` with tabs expanded."""
    expanded = line.expandtabs(tab_size)
    return len(expanded) - len(expanded.lstrip(" "))
