from __future__ import annotations
import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Deque, Dict, Iterator, List, Optional

from ..indent.analyzer import IndentationAnalyzer, LinePlan, split_source_lines
from ..protocol import (
    STATUS_BUSY,
    STATUS_ERROR,
    STATUS_NOT_FOUND,
    STATUS_SUCCESS,
    make_response,
)
from ..utils import HiResTimer
from .config import kcfg
from .pacer import SleepFn, _Pacer
from .telemetry import KeystrokeRecorder
from .typos import TypoModel

logger = logging.getLogger(__name__)

# Adapter attribute naming the scheduler that last claimed it
ADAPTER_ATTR = "_codetyper_scheduler"


def bound_scheduler(adapter) -> Optional["TypingScheduler"]:
    """The scheduler that last claimed ``adapter``, if any."""
    return getattr(adapter, ADAPTER_ATTR, None)


@dataclass(frozen=True)
class TypingUnit:
    """One atomic step of a session: a character, or Enter plus its plan pair."""

    kind: str  # "char" | "newline"
    line: int
    char: str = ""
    plan: Optional[LinePlan] = None
    next_plan: Optional[LinePlan] = None

    @property
    def next_target(self) -> int:
        if self.next_plan is not None:
            return self.next_plan.target_indent
        return self.plan.next_indent if self.plan is not None else 0


@dataclass
class SchedulerState:
    is_active: bool = False
    queue: Deque[TypingUnit] = field(default_factory=deque)
    pending_indents: Deque[int] = field(default_factory=deque)

    def clear(self) -> None:
        self.is_active = False
        self.queue.clear()
        self.pending_indents.clear()


def build_units(
    lines: List[str], plans: List[LinePlan], trailing_newline: bool
) -> Iterator[TypingUnit]:
    """Lay out a session as units, in source order.

    Typed lines contribute their trimmed characters. A newline follows every
    line but the last; the last gets one too when the text ended with a
    newline, or when it is a comment (comments always cost one Enter).
    """
    last = len(lines) - 1
    for number, (line, plan) in enumerate(zip(lines, plans)):
        if plan.is_typed:
            for ch in line.strip():
                yield TypingUnit("char", number, ch)
        if number < last:
            yield TypingUnit("newline", number, plan=plan, next_plan=plans[number + 1])
        elif trailing_newline or plan.is_comment:
            yield TypingUnit("newline", number, plan=plan)


class TypingScheduler:
    """Types source code into one editor adapter, one unit at a time.

    ``submit`` claims the adapter and starts a background task that drains
    the queue: before every unit it makes sure the edit area is there
    (retrying on a fixed period), then emits the unit and sleeps for a
    jittered delay. Newlines are followed by corrective Backspaces when the
    editor's auto-indent overshoots the planned indentation.
    """

    def __init__(
        self,
        adapter,
        *,
        indent_unit: Optional[int] = None,
        typo_rate: float = kcfg.TYPO_RATE,
        jitter: float = kcfg.JITTER_FRAC,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        sleep: Optional[SleepFn] = None,
        finalize: bool = kcfg.FINALIZE,
        locate_timeout: Optional[float] = kcfg.LOCATE_TIMEOUT_S,
        require_surface: bool = True,
        recorder: Optional[KeystrokeRecorder] = None,
    ):
        self.adapter = adapter
        self.analyzer = IndentationAnalyzer(indent_unit)
        self.indent_unit = self.analyzer.indent_unit
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.typos = TypoModel(typo_rate, self.rng)
        self.recorder = recorder if recorder is not None else KeystrokeRecorder()
        self._pacer = _Pacer(self.rng, sleep or asyncio.sleep, self.recorder, jitter)
        self.finalize = finalize
        self.locate_timeout = locate_timeout
        self.require_surface = require_surface
        self.state = SchedulerState()
        self._tail_indent = 0
        self._task: Optional[asyncio.Task] = None
        self._outcome: Optional[asyncio.Future] = None

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    # -----------------------------------------------------
    # Session entry/exit
    # -----------------------------------------------------

    async def submit(self, source_text: str) -> Dict[str, Any]:
        holder = bound_scheduler(self.adapter)
        if self.state.is_active or (holder is not None and holder.is_active):
            logger.info("Typing session already active; rejecting new code")
            return make_response(STATUS_BUSY)

        # Claim the adapter before the first suspension point
        self.state.is_active = True
        setattr(self.adapter, ADAPTER_ATTR, self)
        try:
            if self.require_surface:
                region = await self._guarded(
                    "findActiveRegion", self.adapter.find_active_region
                )
                if region is None:
                    logger.info("Edit area not found; session not started")
                    self.state.clear()
                    return make_response(STATUS_NOT_FOUND)

            self.recorder.reset(seed=self.seed)
            plans = self.analyzer.analyze(source_text)
            lines, trailing_newline = split_source_lines(source_text)
            self.state.queue.extend(build_units(lines, plans, trailing_newline))
            self.state.pending_indents.extend(plan.target_indent for plan in plans)
            self._tail_indent = plans[-1].next_indent if plans else 0

            loop = asyncio.get_running_loop()
            self._outcome = loop.create_future()
            self._task = loop.create_task(self._run())
            self._task.add_done_callback(self._on_task_done)
        except BaseException:
            self.state.clear()
            raise

        logger.info(
            "Typing session started: %d lines, %d units",
            len(plans),
            len(self.state.queue),
        )
        return make_response(STATUS_SUCCESS)

    async def wait(self) -> Dict[str, Any]:
        """Wait for the current (or last) session and return its outcome."""
        if self._outcome is None:
            raise RuntimeError("no typing session has been submitted")
        return await asyncio.shield(self._outcome)

    def cancel(self) -> bool:
        """Abandon the running session. Returns False when nothing is running."""
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    def _on_task_done(self, task: asyncio.Task) -> None:
        # A task cancelled before its first step never reaches _run's handler
        if task is not self._task or not task.cancelled():
            return
        if self._outcome is not None and not self._outcome.done():
            self._finish(make_response(STATUS_ERROR, "typing session cancelled"))

    def _finish(self, outcome: Dict[str, Any]) -> None:
        self.state.clear()
        if self._outcome is not None and not self._outcome.done():
            self._outcome.set_result(outcome)
        logger.info("Typing session finished: %s", outcome["status"])

    # -----------------------------------------------------
    # Loop
    # -----------------------------------------------------

    async def _run(self) -> None:
        queue = self.state.queue
        try:
            with HiResTimer():
                while queue:
                    if not await self._locate():
                        self._finish(
                            make_response(STATUS_NOT_FOUND, "edit area disappeared")
                        )
                        return
                    unit = queue.popleft()
                    if unit.kind == "newline":
                        await self._type_newline(unit)
                        delay, tag = self._pacer.newline_delay(), "<newline-delay>"
                    else:
                        await self._type_char(unit.char)
                        delay, tag = self._pacer.char_delay(unit.char), "<char-delay>"
                    await self._pacer.sleep(delay, tag)
                if self.finalize:
                    await self._normalize_end()
        except asyncio.CancelledError:
            self._finish(make_response(STATUS_ERROR, "typing session cancelled"))
            raise
        except Exception as exc:
            logger.exception("Typing session aborted")
            self.state.clear()
            if self._outcome is not None and not self._outcome.done():
                self._outcome.set_exception(exc)
            return
        self._finish(make_response(STATUS_SUCCESS))

    async def _locate(self) -> bool:
        waited = 0.0
        while True:
            region = await self._guarded(
                "findActiveRegion", self.adapter.find_active_region
            )
            if region is not None:
                return True
            if self.locate_timeout is not None and waited >= self.locate_timeout:
                logger.warning(
                    "Edit area still missing after %.1fs; giving up", waited
                )
                return False
            self.recorder.locate_retries += 1
            self.recorder.log("retry", "findActiveRegion")
            logger.debug(
                "Active edit area not found, retrying in %.0f ms",
                kcfg.LOCATE_RETRY_S * 1000.0,
            )
            await self._pacer.sleep(kcfg.LOCATE_RETRY_S, "<locate-retry>")
            waited += kcfg.LOCATE_RETRY_S

    # -----------------------------------------------------
    # Units
    # -----------------------------------------------------

    async def _type_char(self, ch: str) -> None:
        decision = self.typos.decide(ch)
        if decision.inject:
            await self._guarded("insertChar", self.adapter.insert_char, decision.substitute)
            self.recorder.log("typo", decision.substitute)
            self.recorder.error_count += 1

            await self._pacer.hold(kcfg.TYPO_NOTICE_PAUSE, "<typo-notice>")
            await self._backspace()
            await self._pacer.hold(kcfg.AFTER_CORRECTION_PAUSE, "<after-correction>")

        await self._guarded("insertChar", self.adapter.insert_char, ch)
        self.recorder.log("char", ch)
        await self._guarded("advanceCaret", self.adapter.advance_caret)

    async def _type_newline(self, unit: TypingUnit) -> None:
        if unit.plan is not None and unit.plan.is_comment:
            self.recorder.log("skip", "<comment>")
        await self._enter()
        # One pending indent per line, in order: the head is the line just ended
        if self.state.pending_indents:
            current = self.state.pending_indents.popleft()
        else:
            current = unit.plan.target_indent if unit.plan is not None else 0
        target = unit.next_target

        await self._pacer.hold(kcfg.AUTO_INDENT_SETTLE, "<auto-indent>")
        count = await self._dedent_count(current, target)
        await self._indent_backspaces(count)

    async def _dedent_count(self, current: int, target: int) -> int:
        # Prefer what the editor actually did; fall back to the plan
        live = await self._guarded(
            "readLeadingIndent", self.adapter.read_leading_indent
        )
        excess = (live if live is not None else current) - target
        if excess <= 0:
            return 0
        return -(-excess // self.indent_unit)

    async def _indent_backspaces(self, count: int) -> None:
        for index in range(count):
            if index:
                await self._pacer.hold(kcfg.INDENT_BACKSPACE_PAUSE, "<indent-backspace>")
            await self._backspace()
            self.recorder.indent_backspaces += 1

    async def _normalize_end(self) -> None:
        """Two blank lines, then Backspace whatever indentation is left."""
        await self._pacer.sleep(kcfg.FINALIZE_PAUSE_S, "<finalize>")
        for _ in range(2):
            await self._enter()
            await self._pacer.sleep(kcfg.FINALIZE_PAUSE_S, "<finalize>")
        count = await self._dedent_count(self._tail_indent, 0)
        await self._indent_backspaces(count)

    async def _enter(self) -> None:
        await self._guarded("dispatchEnter", self.adapter.dispatch_enter)
        self.recorder.log("keyDown", "Enter")

    async def _backspace(self) -> None:
        await self._guarded("dispatchBackspace", self.adapter.dispatch_backspace)
        self.recorder.log("keyDown", "Backspace")

    async def _guarded(self, operation: str, fn: Callable[..., Awaitable[Any]], *args) -> Any:
        try:
            return await fn(*args)
        except Exception:
            self.recorder.failures += 1
            self.recorder.log("failure", operation)
            logger.warning(
                "Editor %s failed (skipped this keystroke)", operation, exc_info=True
            )
            return None
