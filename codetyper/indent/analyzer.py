from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

from ..utils import leading_width
from .config import icfg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinePlan:
    """Where one source line should sit once typed, and what role it plays."""

    number: int
    target_indent: int  # columns, always a multiple of indent_unit
    indent_unit: int = icfg.INDENT_UNIT
    is_block_opener: bool = False
    is_dedent_trigger: bool = False
    is_blank: bool = False
    is_comment: bool = False
    is_import: bool = False
    is_definition: bool = False
    in_string: bool = False  # starts inside a multi-line string literal

    @property
    def depth(self) -> int:
        return self.target_indent // self.indent_unit

    @property
    def is_typed(self) -> bool:
        """False for lines whose text is never emitted (blank, comment-only)."""
        return not (self.is_blank or self.is_comment)

    @property
    def next_indent(self) -> int:
        """Indentation expected for a following line that is not in the source."""
        if self.is_block_opener:
            return self.target_indent + self.indent_unit
        if self.is_dedent_trigger:
            return max(0, self.target_indent - self.indent_unit)
        return self.target_indent


class _Frame(NamedTuple):
    level: int
    opener_width: int  # literal width of the line that opened the block
    kind: str  # "root" | "block" | "class" | "def"


_ROOT = _Frame(0, -1, "root")


def split_source_lines(text: str) -> Tuple[List[str], bool]:
    """Split source text into lines.

    Returns the lines and whether the text ended with a newline. The empty
    segment after a terminating newline is not a line of its own.
    """
    if not text:
        return [], False
    lines = text.split("\n")
    trailing_newline = lines[-1] == ""
    if trailing_newline:
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines], (
        trailing_newline
    )


def is_comment_line(trimmed: str) -> bool:
    return trimmed.startswith(icfg.COMMENT_MARKERS)


def scan_strings(line: str, open_delim: Optional[str] = None) -> Optional[str]:
    """Return the multi-line string delimiter still open at the end of ``line``.

    ``open_delim`` is the delimiter open at the start of the line (None when
    the line starts in code). Single-quoted literals and ``#`` comments are
    skipped so quotes inside them do not count.
    """
    i, n = 0, len(line)
    while i < n:
        if open_delim is not None:
            if line[i] == "\\":
                i += 2
                continue
            if line.startswith(open_delim, i):
                i += len(open_delim)
                open_delim = None
                continue
            i += 1
            continue
        ch = line[i]
        if ch == "#":
            break
        delim = next((d for d in icfg.STRING_DELIMITERS if line.startswith(d, i)), None)
        if delim is not None:
            open_delim = delim
            i += len(delim)
            continue
        if ch in "'\"":
            # Ordinary literal: skip to its closing quote on this line
            i += 1
            while i < n and line[i] != ch:
                i += 2 if line[i] == "\\" else 1
        i += 1
    return open_delim


class IndentationAnalyzer:
    """Derives per-line target indentation from the structure of source code.

    The analyzer walks the lines top to bottom with a stack of open blocks.
    A line pops every block whose opening line was not shallower than it,
    lands at the depth of the innermost remaining block, and pushes a new
    block when it ends with a colon or defines a class or function.
    Imports are pinned to column 0 and definitions inside a class are
    normalized to the class body, whatever nesting preceded them. Lines
    inside a triple-quoted string are text, not structure: they stay at
    least as deep as the enclosing block and leave the stack alone.
    """

    def __init__(self, indent_unit: Optional[int] = None):
        unit = icfg.INDENT_UNIT if indent_unit is None else int(indent_unit)
        if unit <= 0:
            raise ValueError(f"indent_unit must be positive, got {indent_unit!r}")
        self.indent_unit = unit

    def analyze(self, source_text: str) -> List[LinePlan]:
        lines, _ = split_source_lines(source_text)
        stack: List[_Frame] = [_ROOT]
        plans: List[LinePlan] = []
        open_delim: Optional[str] = None
        for number, line in enumerate(lines):
            if open_delim is not None:
                plans.append(self._plan_string_line(number, line, stack))
                open_delim = scan_strings(line, open_delim)
                continue
            if is_comment_line(line.strip()):
                still_open = None
            else:
                still_open = scan_strings(line)
            plans.append(
                self._plan_line(number, line, stack, still_open is not None)
            )
            open_delim = still_open
        logger.debug(
            "Planned %d lines (max depth %d)",
            len(plans),
            max((plan.depth for plan in plans), default=0),
        )
        return plans

    def _plan_string_line(self, number: int, line: str, stack: List[_Frame]) -> LinePlan:
        # String contents keep any extra depth they have but never go
        # shallower than the enclosing block, and never touch the stack
        unit = self.indent_unit
        floor = stack[-1].level * unit
        if not line.strip():
            return LinePlan(number, floor, unit, is_blank=True, in_string=True)
        literal = (leading_width(line, unit) // unit) * unit
        return LinePlan(number, max(floor, literal), unit, in_string=True)

    def _plan_line(
        self, number: int, line: str, stack: List[_Frame], ends_in_string: bool = False
    ) -> LinePlan:
        unit = self.indent_unit
        trimmed = line.strip()

        # Blank and comment-only lines never move the stack
        if not trimmed:
            return LinePlan(number, stack[-1].level * unit, unit, is_blank=True)
        if is_comment_line(trimmed):
            return LinePlan(number, stack[-1].level * unit, unit, is_comment=True)

        if icfg.IMPORT_LINE.match(trimmed):
            return LinePlan(number, 0, unit, is_import=True)

        width = leading_width(line, unit)
        while len(stack) > 1 and width <= stack[-1].opener_width:
            stack.pop()

        kind = None
        if icfg.CLASS_DEF.match(trimmed):
            kind = "class"
        elif icfg.FUNCTION_DEF.match(trimmed):
            kind = "def"
        if kind is not None:
            _normalize_to_class_body(stack)

        code = icfg.INLINE_COMMENT.sub("", trimmed)
        opener = not ends_in_string and bool(icfg.BLOCK_OPENER.search(code))
        plan = LinePlan(
            number,
            stack[-1].level * unit,
            unit,
            is_block_opener=opener,
            is_dedent_trigger=bool(icfg.DEDENT_TRIGGER.match(trimmed)),
            is_definition=kind is not None,
        )
        # Definitions always open a level, even when the signature wraps
        if opener or kind is not None:
            stack.append(_Frame(stack[-1].level + 1, width, kind or "block"))
        return plan


def _normalize_to_class_body(stack: List[_Frame]) -> None:
    # Innermost definition decides: a class drops stray blocks above it,
    # a function keeps its nesting (nested def).
    for index in range(len(stack) - 1, 0, -1):
        kind = stack[index].kind
        if kind == "def":
            return
        if kind == "class":
            del stack[index + 1 :]
            return


def analyze(source_text: str, indent_unit: Optional[int] = None) -> List[LinePlan]:
    """Return one LinePlan per source line. Pure and deterministic."""
    return IndentationAnalyzer(indent_unit).analyze(source_text)
