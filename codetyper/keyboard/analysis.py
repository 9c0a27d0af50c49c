from __future__ import annotations
import logging
from typing import List, Tuple
from .telemetry import KeystrokeEvent, KeystrokeRecorder

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug

_CHARS_PER_WORD = 5.0


def _session_span(events: List[KeystrokeEvent]) -> float:
    # Wall-clock span, or the planned pauses when sleeping was instant
    span = events[-1].t - events[0].t
    planned = sum(e.dt for e in events if e.kind == "pause")
    return span if span > planned * 0.5 else planned


def _line_spans(events: List[KeystrokeEvent]) -> List[Tuple[int, float]]:
    """(characters, planned seconds) for every typed line, split at Enter."""
    spans: List[Tuple[int, float]] = []
    chars, seconds = 0, 0.0
    for e in events:
        if e.kind == "char":
            chars += 1
        elif e.kind == "pause" and e.value != "<locate-retry>":
            seconds += e.dt
        elif e.kind == "keyDown" and e.value == "Enter":
            if chars:
                spans.append((chars, seconds))
            chars, seconds = 0, 0.0
    if chars:
        spans.append((chars, seconds))
    return spans


def _wpm(chars: int, seconds: float) -> float:
    return (chars / _CHARS_PER_WORD) * 60.0 / seconds if seconds > 0 else 0.0


def summarize_typing(recorder: KeystrokeRecorder) -> str:
    """
    Reports:
      - Session duration
      - Average WPM (pauses, corrections and newlines included)
      - Line WPM (slowest/median/fastest typed line)
      - Chars, newlines, skipped comments, corrections, indentation backspaces
      - Locate retries and failed editor calls
      - Seed used
    """
    evs = recorder.events
    if len(evs) < 2:
        return "No typing data"

    duration = _session_span(evs)
    if duration <= 0:
        return "Invalid timing data"

    typed = recorder.count("char")
    line_wpm = sorted(_wpm(chars, seconds) for chars, seconds in _line_spans(evs))
    if line_wpm:
        slowest, median, fastest = line_wpm[0], line_wpm[len(line_wpm) // 2], line_wpm[-1]
    else:
        slowest = median = fastest = 0.0

    return (
        "Typing Summary:\n"
        f"  Session duration: {duration:.2f}s\n"
        f"  Average WPM (with pauses): {_wpm(typed, duration):.2f}\n"
        f"  Line WPM (slowest/median/fastest): {slowest:.2f} / {median:.2f} / {fastest:.2f}\n"
        f"  Chars typed: {typed}\n"
        f"  Newlines: {recorder.count('keyDown', 'Enter')}\n"
        f"  Comment lines skipped: {recorder.count('skip')}\n"
        f"  Corrections (errors fixed): {recorder.error_count}\n"
        f"  Indentation backspaces: {recorder.indent_backspaces}\n"
        f"  Locate retries: {recorder.locate_retries}\n"
        f"  Failed editor calls: {recorder.failures}\n"
        f"  Random seed: {recorder.seed if recorder.seed is not None else 'N/A'}"
    )


async def print_typing_summary(recorder: KeystrokeRecorder) -> None:
    """Async helper that prints the summary."""
    print(summarize_typing(recorder))
