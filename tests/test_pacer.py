from __future__ import annotations

import asyncio
import random

import pytest

from codetyper.keyboard.config import kcfg
from codetyper.keyboard.pacer import _Pacer
from codetyper.keyboard.telemetry import KeystrokeRecorder


def _pacer(seed=0, jitter=kcfg.JITTER_FRAC, sleep=None):
    async def _no_sleep(dt):
        return None

    return _Pacer(random.Random(seed), sleep or _no_sleep, KeystrokeRecorder(), jitter)


@pytest.mark.parametrize(
    "ch, base",
    [
        ("a", kcfg.CHAR_DELAY_S),
        ("7", kcfg.CHAR_DELAY_S),
        (" ", kcfg.CHAR_DELAY_S * kcfg.SPACE_FACTOR),
        (".", kcfg.CHAR_DELAY_S * kcfg.PUNCT_FACTOR),
        ("(", kcfg.CHAR_DELAY_S * kcfg.PUNCT_FACTOR),
    ],
)
def test_char_delay_stays_in_jitter_band(ch, base):
    pacer = _pacer(seed=11)
    for _ in range(200):
        dt = pacer.char_delay(ch)
        assert base * (1 - pacer.jitter) - 1e-9 <= dt <= base * (1 + pacer.jitter) + 1e-9


def test_newline_and_punctuation_are_slower_than_letters():
    pacer = _pacer(seed=2)
    letters = sum(pacer.char_delay("x") for _ in range(300)) / 300
    punct = sum(pacer.char_delay(";") for _ in range(300)) / 300
    newlines = sum(pacer.newline_delay() for _ in range(300)) / 300
    assert punct > letters
    assert newlines > punct


@pytest.mark.parametrize("requested, effective", [(0.1, 0.30), (0.45, 0.45), (0.9, 0.60)])
def test_jitter_is_kept_within_band(requested, effective):
    assert _pacer(jitter=requested).jitter == pytest.approx(effective)


def test_same_seed_same_cadence():
    a, b = _pacer(seed=8), _pacer(seed=8)
    assert [a.char_delay("k") for _ in range(50)] == [b.char_delay("k") for _ in range(50)]


def test_sleep_goes_through_injected_function_and_is_logged():
    slept = []

    async def fake_sleep(dt):
        slept.append(dt)

    pacer = _pacer(sleep=fake_sleep)
    asyncio.run(pacer.sleep(0.25, "<tag>"))
    asyncio.run(pacer.hold((0.1, 0.2), "<hold>"))

    assert slept[0] == 0.25
    assert 0.1 <= slept[1] <= 0.2
    assert [e.value for e in pacer.recorder.events] == ["<tag>", "<hold>"]
    assert pacer.elapsed == pytest.approx(sum(slept))
