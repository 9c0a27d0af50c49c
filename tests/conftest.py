from __future__ import annotations

import asyncio
from typing import List

import pytest

from codetyper.keyboard.scheduler import TypingScheduler


class SleepRecorder:
    """Instant stand-in for asyncio.sleep that remembers what was asked."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, dt: float) -> None:
        self.delays.append(dt)
        await asyncio.sleep(0)


@pytest.fixture
def instant_sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def run_session():
    """Run one full session against ``adapter`` and return (scheduler, response, outcome)."""

    def _run(adapter, code, **kwargs):
        kwargs.setdefault("sleep", SleepRecorder())
        kwargs.setdefault("typo_rate", 0.0)

        async def _go():
            scheduler = TypingScheduler(adapter, **kwargs)
            response = await scheduler.submit(code)
            outcome = None
            if response["status"] == "success":
                outcome = await scheduler.wait()
            return scheduler, response, outcome

        return asyncio.run(_go())

    return _run
