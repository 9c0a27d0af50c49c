from __future__ import annotations
from typing import Tuple


class kcfg:
    # Base per-unit delays (seconds) before jitter
    CHAR_DELAY_S = 0.050
    NEWLINE_DELAY_S = 0.100
    PUNCT_FACTOR = 1.5  # punctuation is reached for more slowly
    SPACE_FACTOR = 1.2

    # Multiplicative jitter: delay = base * (1 +/- JITTER_FRAC)
    JITTER_FRAC = 0.30
    JITTER_FRAC_RANGE = (0.30, 0.60)

    # Error/typo model
    TYPO_RATE = 0.025

    # Typo correction cadence
    TYPO_NOTICE_PAUSE: Tuple[float, float] = (0.100, 0.200)  # before Backspace
    AFTER_CORRECTION_PAUSE: Tuple[float, float] = (0.050, 0.150)

    # Indentation correction after Enter
    AUTO_INDENT_SETTLE: Tuple[float, float] = (0.040, 0.060)  # let the editor indent
    INDENT_BACKSPACE_PAUSE: Tuple[float, float] = (0.010, 0.050)

    # Locating the edit area
    LOCATE_RETRY_S = 0.500
    LOCATE_TIMEOUT_S = None  # None: retry forever

    # End-of-input normalization (two blank lines, caret back to column 0)
    FINALIZE = False
    FINALIZE_PAUSE_S = 0.100

    # Low-level timing
    GLOBAL_MIN_INTERVAL_S = 0.009

    # Timeout for CDP operations (keep input sends from blocking the loop)
    CDP_SEND_TIMEOUT_S = 0.35
