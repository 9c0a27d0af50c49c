from __future__ import annotations
import re
from typing import Pattern, Tuple


class icfg:
    # Columns per nesting level
    INDENT_UNIT = 4

    # Lines that always land at column 0 (leave the stack alone)
    IMPORT_LINE: Pattern[str] = re.compile(r"^(from|import)\s+")

    # Definitions get class-body normalization
    CLASS_DEF: Pattern[str] = re.compile(r"^class\s+\w+")
    FUNCTION_DEF: Pattern[str] = re.compile(r"^(async\s+)?def\s+\w+")

    # Leading keywords after which the next line is expected one level out
    DEDENT_TRIGGER: Pattern[str] = re.compile(
        r"^(return|pass|break|continue|raise|else|elif|except|finally)\b"
    )

    # Trailing colon opens a block (inline comment ignored)
    BLOCK_OPENER: Pattern[str] = re.compile(r":\s*$")
    INLINE_COMMENT: Pattern[str] = re.compile(r"\s+#.*$")

    # Comment-only lines are never typed
    COMMENT_MARKERS: Tuple[str, ...] = ("#", "//")

    # Multi-line string delimiters; lines inside them carry no structure
    STRING_DELIMITERS: Tuple[str, ...] = ('"""', "'''")
