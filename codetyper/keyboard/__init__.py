from .behaviors import type_code, get_scheduler
from .scheduler import TypingScheduler, SchedulerState, TypingUnit, build_units
from .typos import TypoModel, TypoDecision
from .analysis import summarize_typing, print_typing_summary
from .render import save_typing_timeline_jpeg
from .telemetry import KeystrokeRecorder, KeystrokeEvent
from .config import kcfg

__all__ = [
    "type_code",
    "get_scheduler",
    "TypingScheduler",
    "SchedulerState",
    "TypingUnit",
    "build_units",
    "TypoModel",
    "TypoDecision",
    "summarize_typing",
    "print_typing_summary",
    "save_typing_timeline_jpeg",
    "KeystrokeRecorder",
    "KeystrokeEvent",
    "kcfg",
]
