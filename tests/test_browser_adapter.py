from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from codetyper.adapters import EDITOR_PRESETS, BrowserEditorAdapter
from codetyper.errors import AdapterOperationFailed
from codetyper.keyboard.config import kcfg
from codetyper.keyboard.scheduler import TypingScheduler

from .conftest import SleepRecorder


class FakePage:
    """Records CDP commands the way a zendriver Tab would receive them."""

    def __init__(self, evaluate=None, fail=None, stall=0.0):
        self.sent = []
        self.evaluate = evaluate or (lambda expression: True)
        self.fail = fail
        self.stall = stall

    async def send(self, cmd):
        request = next(cmd)
        self.sent.append(request)
        if self.stall:
            await asyncio.sleep(self.stall)
        if self.fail is not None:
            raise self.fail
        if request["method"] == "Runtime.evaluate":
            value = self.evaluate(request["params"]["expression"])
            return SimpleNamespace(value=value), None
        return None

    def methods(self):
        return [request["method"] for request in self.sent]

    def key_events(self):
        return [
            (request["params"]["type"], request["params"]["key"], request["params"].get("text"))
            for request in self.sent
            if request["method"] == "Input.dispatchKeyEvent"
        ]


def test_insert_char_uses_insert_text():
    page = FakePage()
    asyncio.run(BrowserEditorAdapter(page).insert_char("x"))

    assert page.sent == [{"method": "Input.insertText", "params": {"text": "x"}}]


def test_enter_and_backspace_key_events():
    page = FakePage()
    adapter = BrowserEditorAdapter(page)

    async def _go():
        await adapter.dispatch_enter()
        await adapter.dispatch_backspace()

    asyncio.run(_go())
    assert page.key_events() == [
        ("keyDown", "Enter", "\r"),
        ("keyUp", "Enter", None),
        ("rawKeyDown", "Backspace", None),
        ("keyUp", "Backspace", None),
    ]


@pytest.mark.parametrize("enabled, expected", [(False, []), (True, ["ArrowRight", "ArrowRight"])])
def test_advance_caret_only_when_enabled(enabled, expected):
    page = FakePage()
    asyncio.run(BrowserEditorAdapter(page, arrow_after_insert=enabled).advance_caret())

    assert [key for _, key, _ in page.key_events()] == expected


@pytest.mark.parametrize("found, expected", [(True, ".cm-content"), (False, None)])
def test_find_active_region(found, expected):
    page = FakePage(evaluate=lambda expression: found)
    adapter = BrowserEditorAdapter(page, ".cm-content")

    assert asyncio.run(adapter.find_active_region()) == expected
    assert '".cm-content"' in page.sent[0]["params"]["expression"]


@pytest.mark.parametrize("value, expected", [(8, 8), (4.0, 4), (None, None), ("garbage", None)])
def test_read_leading_indent(value, expected):
    page = FakePage(evaluate=lambda expression: value)
    adapter = BrowserEditorAdapter(page)

    assert asyncio.run(adapter.read_leading_indent()) == expected


def test_read_leading_indent_prefers_active_line_element():
    page = FakePage(evaluate=lambda expression: 0)
    adapter = BrowserEditorAdapter(page, active_line_selector=".cm-activeLine")
    asyncio.run(adapter.read_leading_indent())

    assert '".cm-activeLine"' in page.sent[0]["params"]["expression"]


def test_failed_send_raises_adapter_error():
    page = FakePage(fail=ConnectionError("socket closed"))

    with pytest.raises(AdapterOperationFailed) as info:
        asyncio.run(BrowserEditorAdapter(page).insert_char("a"))
    assert info.value.operation == "insertText"
    assert isinstance(info.value.__cause__, ConnectionError)


def test_stalled_send_does_not_block(monkeypatch):
    monkeypatch.setattr(kcfg, "CDP_SEND_TIMEOUT_S", 0.01)
    page = FakePage(stall=0.5)

    assert asyncio.run(BrowserEditorAdapter(page).find_active_region()) is None


def test_presets():
    adapter = BrowserEditorAdapter.for_editor(FakePage(), "replit", indent_unit=2)

    assert adapter.selector == EDITOR_PRESETS["replit"]["selector"]
    assert adapter.active_line_selector == ".cm-replit-active-line"
    assert adapter.indent_unit == 2
    with pytest.raises(ValueError):
        BrowserEditorAdapter.for_editor(FakePage(), "notepad")


def test_scheduler_drives_browser_adapter():
    page = FakePage(evaluate=lambda expression: True if "querySelector(\"#innerdocbody\")" in expression else 4)
    adapter = BrowserEditorAdapter(page)

    async def _go():
        scheduler = TypingScheduler(adapter, typo_rate=0.0, sleep=SleepRecorder())
        await scheduler.submit("if x:\n    pass\n")
        return await scheduler.wait(), scheduler

    outcome, scheduler = asyncio.run(_go())
    inserted = "".join(
        request["params"]["text"] for request in page.sent if request["method"] == "Input.insertText"
    )
    assert outcome == {"status": "success"}
    assert inserted == "if x:pass"
    # the editor reports 4 columns after each Enter; only the last line returns to 0
    assert scheduler.recorder.indent_backspaces == 1
    assert scheduler.recorder.failures == 0
