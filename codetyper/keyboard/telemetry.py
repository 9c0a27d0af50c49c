from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import time


@dataclass(frozen=True)
class KeystrokeEvent:
    t: float
    kind: str  # 'char' | 'typo' | 'keyDown' | 'pause' | 'skip' | 'retry' | 'failure'
    value: str  # character, key name, pause tag, or failed operation
    dt: float  # planned delay for pauses (seconds), 0.0 otherwise


@dataclass
class KeystrokeRecorder:
    events: List[KeystrokeEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())
    seed: Optional[int] = None
    error_count: int = 0  # number of typo corrections performed
    indent_backspaces: int = 0  # Backspaces spent fixing auto-indentation
    locate_retries: int = 0
    failures: int = 0  # adapter calls that raised

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log(self, kind: str, value: str, dt: float = 0.0) -> None:
        self.events.append(KeystrokeEvent(self._now(), kind, value, dt))

    def count(self, kind: str, value: Optional[str] = None) -> int:
        return sum(
            1
            for event in self.events
            if event.kind == kind and (value is None or event.value == value)
        )

    def typed_text(self) -> str:
        """Intended characters in emission order (typos excluded)."""
        return "".join(event.value for event in self.events if event.kind == "char")

    def reset(self, seed: Optional[int] = None) -> None:
        self.events.clear()
        self.start_ts = time.perf_counter()
        self.seed = seed
        self.error_count = 0
        self.indent_backspaces = 0
        self.locate_retries = 0
        self.failures = 0
