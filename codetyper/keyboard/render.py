from __future__ import annotations
import asyncio
import math
import logging
from typing import Dict, Tuple
from PIL import Image, ImageDraw

from .telemetry import KeystrokeRecorder

# Tick colors per keystroke kind
_KIND_COLORS: Dict[str, Tuple[int, int, int]] = {
    "char": (60, 205, 60),
    "typo": (255, 60, 60),
    "Backspace": (255, 170, 40),
    "Enter": (0, 120, 255),
    "skip": (150, 150, 150),
    "retry": (200, 80, 220),
    "failure": (255, 255, 255),
}


def _quantile(values, q):
    """Robust quantile (0..1). Returns value at the given fraction."""
    if not values:
        return 0.0
    q = min(1.0, max(0.0, float(q)))
    data = sorted(values)
    idx = q * (len(data) - 1)
    lo = int(math.floor(idx))
    hi = int(math.ceil(idx))
    if lo == hi:
        return data[lo]
    frac = idx - lo
    return data[lo] * (1 - frac) + data[hi] * frac


def _pause_to_rgb(dt, dt_min, dt_max):
    """
    Map a pause length to RGB:
      - short => green (60, 205, 60)
      - long  => red  (255, 60, 60)
    """
    if dt_max <= dt_min:
        t = 0.0
    else:
        t = (dt - dt_min) / (dt_max - dt_min)
    t = max(0.0, min(1.0, t))
    r0, g0, b0 = (60, 205, 60)
    r1, g1, b1 = (255, 60, 60)
    return (int(r0 + (r1 - r0) * t), int(g0 + (g1 - g0) * t), int(b0 + (b1 - b0) * t))


async def save_typing_timeline_jpeg(
    recorder: KeystrokeRecorder,
    outfile: str = "typing_timeline.jpg",
    *,
    width: int = 1200,
    height: int = 240,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    canvas_margin: int = 20,
    annotate: bool = True,
) -> str:
    """
    Render a session as a timeline: one tick per keystroke (colored by kind)
    above a strip of pause bars whose height and color follow their length.
    The x axis is the cumulative planned pause time, so dry runs with an
    instant sleep still produce a readable picture. Rendering is offloaded
    to a worker thread to avoid blocking the event loop.
    """
    events_snapshot = list(recorder.events)

    def _render() -> str:
        image = Image.new("RGB", (width, height), background_color)
        draw = ImageDraw.Draw(image)

        pauses = [e.dt for e in events_snapshot if e.kind == "pause"]
        total = sum(pauses)
        if not events_snapshot or total <= 0:
            if annotate:
                draw.text(
                    (canvas_margin, canvas_margin),
                    "No typing events recorded",
                    fill=(180, 180, 180),
                )
            image.save(outfile, format="JPEG", quality=92, optimize=True)
            return outfile

        plot_width = width - canvas_margin * 2
        tick_top = canvas_margin
        tick_bottom = height // 2 - 6
        bar_base = height - canvas_margin - 18
        bar_max = max(1, bar_base - (height // 2))
        dt_min, dt_max = min(pauses), max(pauses)

        clock = 0.0
        for ev in events_snapshot:
            x = canvas_margin + plot_width * (clock / total)
            if ev.kind == "pause":
                x_end = canvas_margin + plot_width * ((clock + ev.dt) / total)
                scale = 0.0 if dt_max <= 0 else ev.dt / dt_max
                draw.rectangle(
                    [x, bar_base - max(1.0, bar_max * scale), max(x, x_end - 1), bar_base],
                    fill=_pause_to_rgb(ev.dt, dt_min, dt_max),
                )
                clock += ev.dt
                continue
            key = ev.value if ev.kind == "keyDown" else ev.kind
            color = _KIND_COLORS.get(key)
            if color is not None:
                draw.line([(x, tick_top), (x, tick_bottom)], fill=color, width=1)

        if annotate:
            summary = (
                f"Events: {len(events_snapshot)} | pauses {len(pauses)} | "
                f"p50 {_quantile(pauses, 0.5) * 1000:.0f} ms | "
                f"p95 {_quantile(pauses, 0.95) * 1000:.0f} ms | total {total:.2f}s"
            )
            draw.text(
                (canvas_margin, height - canvas_margin - 12),
                summary,
                fill=(200, 200, 200),
            )

        image.save(outfile, format="JPEG", quality=92, optimize=True)
        return outfile

    outfile_path = await asyncio.to_thread(_render)
    logging.getLogger(__name__).debug("Typing timeline saved to %s", outfile_path)
    return outfile_path
