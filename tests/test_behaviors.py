from __future__ import annotations

import asyncio

import pytest

from codetyper import SchedulerBusy, TargetNotFound, type_code
from codetyper.adapters import MemoryEditor
from codetyper.errors import CodeTyperError
from codetyper.keyboard import TypingScheduler, get_scheduler
from codetyper.protocol import handle_message, make_request

from .conftest import SleepRecorder


def test_type_code_returns_recorder():
    editor = MemoryEditor()
    recorder = asyncio.run(
        type_code(editor, "for i in x:\n    pass\n", typo_rate=0.0, seed=9, sleep=SleepRecorder())
    )

    assert editor.text == "for i in x:\n    pass\n"
    assert recorder.typed_text() == "for i in x:pass"
    assert recorder.seed == 9
    assert get_scheduler(editor).recorder is recorder
    assert not get_scheduler(editor).is_active


def test_type_code_without_editor_raises():
    with pytest.raises(TargetNotFound):
        asyncio.run(type_code(MemoryEditor(available=False), "x", sleep=SleepRecorder()))


def test_type_code_when_editor_vanishes_mid_session():
    editor = MemoryEditor(missing_probes=10)
    with pytest.raises(TargetNotFound):
        asyncio.run(
            type_code(
                editor, "x", require_surface=False, locate_timeout=0.5, sleep=SleepRecorder()
            )
        )


def test_type_code_rejects_concurrent_session():
    editor = MemoryEditor()

    async def _go():
        first = asyncio.create_task(type_code(editor, "abc\n" * 5, sleep=SleepRecorder()))
        await asyncio.sleep(0)
        with pytest.raises(SchedulerBusy):
            await type_code(editor, "zzz", sleep=SleepRecorder())
        return await first

    recorder = asyncio.run(_go())
    assert recorder.typed_text() == "abc" * 5
    assert "z" not in editor.text


def test_type_code_respects_session_started_by_host():
    editor = MemoryEditor()

    async def _go():
        host = TypingScheduler(editor, typo_rate=0.0, sleep=SleepRecorder())
        response = await handle_message(host, make_request("aaaa"))
        with pytest.raises(SchedulerBusy):
            await type_code(editor, "bbbb", sleep=SleepRecorder())
        await host.wait()
        return response

    assert asyncio.run(_go()) == {"status": "success"}
    assert editor.text == "aaaa"


def test_type_code_cancelled_session_raises():
    editor = MemoryEditor()

    async def _go():
        task = asyncio.create_task(type_code(editor, "abcdef", sleep=SleepRecorder()))
        await asyncio.sleep(0)
        get_scheduler(editor).cancel()
        await task

    with pytest.raises(CodeTyperError):
        asyncio.run(_go())
