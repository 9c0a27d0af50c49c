from __future__ import annotations
import logging
from typing import Optional

from ..errors import CodeTyperError, SchedulerBusy, TargetNotFound
from ..protocol import STATUS_BUSY, STATUS_NOT_FOUND, STATUS_SUCCESS
from .analysis import summarize_typing
from .scheduler import TypingScheduler, bound_scheduler
from .telemetry import KeystrokeRecorder

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug


def get_scheduler(adapter) -> Optional[TypingScheduler]:
    """The scheduler that last started a session on ``adapter``, if any."""
    return bound_scheduler(adapter)


async def type_code(
    adapter,
    code: str,
    *,
    log_summary: bool = False,
    **scheduler_kwargs,
) -> KeystrokeRecorder:
    """
    Type ``code`` into the editor behind ``adapter`` like a human and wait
    until the last keystroke has landed.

    Keyword arguments are passed to :class:`TypingScheduler` (``seed``,
    ``typo_rate``, ``finalize``, ``locate_timeout``...). Only one session
    runs per adapter: a second call while one is typing raises
    :class:`SchedulerBusy`. A missing edit area raises :class:`TargetNotFound`.
    """
    scheduler = TypingScheduler(adapter, **scheduler_kwargs)

    response = await scheduler.submit(code)
    if response["status"] == STATUS_BUSY:
        raise SchedulerBusy("a typing session is already running on this editor")
    if response["status"] == STATUS_NOT_FOUND:
        raise TargetNotFound("edit area not found")

    outcome = await scheduler.wait()
    if outcome["status"] == STATUS_NOT_FOUND:
        raise TargetNotFound(outcome.get("message", "edit area not found"))
    if outcome["status"] != STATUS_SUCCESS:
        raise CodeTyperError(outcome.get("message", "typing session failed"))

    if log_summary:
        print(summarize_typing(scheduler.recorder))
    return scheduler.recorder
