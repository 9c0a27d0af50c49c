from __future__ import annotations
from typing import List, Optional, Tuple

from ..indent.config import icfg
from ..utils import leading_width
from .base import EditorAdapter


class MemoryEditor(EditorAdapter):
    """In-memory stand-in for a code editor that auto-indents.

    The caret always sits at the end of the buffer. Enter copies the current
    line's indentation (one unit more after a trailing colon), and Backspace
    inside leading whitespace steps back to the previous indent stop, the
    way CodeMirror-style editors behave.
    """

    def __init__(
        self,
        *,
        indent_unit: int = icfg.INDENT_UNIT,
        auto_indent: bool = True,
        readable: bool = True,
        missing_probes: int = 0,
        available: bool = True,
    ):
        self.indent_unit = indent_unit
        self.auto_indent = auto_indent
        self.readable = readable
        self.available = available
        self.missing_probes = missing_probes  # first N lookups report "absent"
        self.lines: List[str] = [""]
        self.calls: List[Tuple[str, str]] = []

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def ops(self, name: str) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] == name]

    async def find_active_region(self) -> Optional["MemoryEditor"]:
        self.calls.append(("find", ""))
        if self.missing_probes > 0:
            self.missing_probes -= 1
            return None
        return self if self.available else None

    async def insert_char(self, ch: str) -> None:
        self.calls.append(("insert", ch))
        self.lines[-1] += ch

    async def dispatch_enter(self) -> None:
        self.calls.append(("enter", ""))
        indent = 0
        if self.auto_indent:
            current = self.lines[-1]
            indent = leading_width(current, self.indent_unit)
            if current.rstrip().endswith(":"):
                indent += self.indent_unit
        self.lines.append(" " * indent)

    async def dispatch_backspace(self) -> None:
        self.calls.append(("backspace", ""))
        line = self.lines[-1]
        if not line:
            if len(self.lines) > 1:
                self.lines.pop()
            return
        if line.strip():
            self.lines[-1] = line[:-1]
            return
        width = len(line)
        self.lines[-1] = " " * (((width - 1) // self.indent_unit) * self.indent_unit)

    async def read_leading_indent(self) -> Optional[int]:
        self.calls.append(("read", ""))
        if not self.readable:
            return None
        return leading_width(self.lines[-1], self.indent_unit)

    async def advance_caret(self) -> None:
        self.calls.append(("advance", ""))
