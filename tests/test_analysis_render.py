from __future__ import annotations

import asyncio

from PIL import Image

from codetyper.adapters import MemoryEditor
from codetyper.keyboard.analysis import summarize_typing
from codetyper.keyboard.render import _pause_to_rgb, _quantile, save_typing_timeline_jpeg
from codetyper.keyboard.telemetry import KeystrokeRecorder

CODE = "def f(x):\n    # double it\n    return x * 2\n"


def test_summary_reports_session_counters(run_session):
    scheduler, _, _ = run_session(MemoryEditor(), CODE, typo_rate=0.2, seed=3)
    summary = summarize_typing(scheduler.recorder)

    assert summary.startswith("Typing Summary:")
    assert "Line WPM (slowest/median/fastest)" in summary
    assert "Chars typed: %d" % len("def f(x):return x * 2") in summary
    assert "Newlines: 3" in summary
    assert "Comment lines skipped: 1" in summary
    assert "Corrections (errors fixed): %d" % scheduler.recorder.error_count in summary
    assert "Indentation backspaces: 1" in summary
    assert "Random seed: 3" in summary


def test_summary_without_events():
    assert summarize_typing(KeystrokeRecorder()) == "No typing data"


def test_quantile_and_colors():
    assert _quantile([], 0.5) == 0.0
    assert _quantile([1.0, 2.0, 3.0], 0.5) == 2.0
    assert _quantile([0.0, 10.0], 0.25) == 2.5
    assert _pause_to_rgb(0.0, 0.0, 1.0) == (60, 205, 60)
    assert _pause_to_rgb(1.0, 0.0, 1.0) == (255, 60, 60)
    assert _pause_to_rgb(0.5, 0.5, 0.5) == (60, 205, 60)


def test_timeline_jpeg_is_written(run_session, tmp_path):
    scheduler, _, _ = run_session(MemoryEditor(), CODE, typo_rate=0.2, seed=5)
    outfile = str(tmp_path / "timeline.jpg")

    assert asyncio.run(save_typing_timeline_jpeg(scheduler.recorder, outfile)) == outfile
    with Image.open(outfile) as image:
        assert image.format == "JPEG"
        assert image.size == (1200, 240)


def test_timeline_for_empty_recorder(tmp_path):
    outfile = str(tmp_path / "empty.jpg")
    asyncio.run(save_typing_timeline_jpeg(KeystrokeRecorder(), outfile, width=320, height=80))

    with Image.open(outfile) as image:
        assert image.size == (320, 80)
