from __future__ import annotations
import json
import logging
from typing import Dict, Optional

from ..indent.config import icfg
from .base import EditorAdapter
from .primitives import (
    _evaluate,
    _emit_insert_text,
    _press_arrow_right,
    _press_backspace,
    _press_enter,
)

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug

# Known editors: where to type and where the caret line lives
EDITOR_PRESETS: Dict[str, Dict[str, Optional[str]]] = {
    "etherpad": {"selector": "#innerdocbody", "active_line_selector": None},
    "replit": {
        "selector": ".cm-content",
        "active_line_selector": ".cm-replit-active-line",
    },
    "codemirror": {"selector": ".cm-content", "active_line_selector": ".cm-activeLine"},
}

_LOCATE_JS = """(() => {
  const el = document.querySelector(%(selector)s);
  if (!el) return false;
  if (document.activeElement !== el && !el.contains(document.activeElement)) {
    el.focus();
  }
  return true;
})()"""

_READ_SELECTION_INDENT_JS = """(() => {
  const sel = window.getSelection();
  if (!sel || sel.rangeCount === 0) return null;
  const node = sel.getRangeAt(0).startContainer;
  const text = (node && node.textContent) || "";
  const m = text.match(/^[ \\t\\u00a0]*/);
  return m ? m[0].replace(/\\t/g, " ".repeat(%(unit)d)).length : 0;
})()"""

_READ_LINE_INDENT_JS = """(() => {
  const line = document.querySelector(%(selector)s);
  if (!line) return null;
  const m = (line.textContent || "").match(/^[ \\t\\u00a0]*/);
  return m ? m[0].replace(/\\t/g, " ".repeat(%(unit)d)).length : 0;
})()"""


class BrowserEditorAdapter(EditorAdapter):
    """Types into an editor inside a zendriver tab over CDP.

    ``selector`` finds (and focuses) the editable element; when
    ``active_line_selector`` is given the caret line's indentation is read
    from that element, otherwise from the DOM selection.
    """

    def __init__(
        self,
        page,
        selector: str = "#innerdocbody",
        *,
        active_line_selector: Optional[str] = None,
        indent_unit: int = icfg.INDENT_UNIT,
        arrow_after_insert: bool = False,
    ):
        self.page = page
        self.selector = selector
        self.active_line_selector = active_line_selector
        self.indent_unit = indent_unit
        self.arrow_after_insert = arrow_after_insert

    @classmethod
    def for_editor(cls, page, name: str, **kwargs) -> "BrowserEditorAdapter":
        try:
            preset = EDITOR_PRESETS[name]
        except KeyError:
            raise ValueError(
                f"unknown editor preset {name!r}; expected one of {sorted(EDITOR_PRESETS)}"
            ) from None
        return cls(page, **{**preset, **kwargs})

    async def find_active_region(self) -> Optional[str]:
        found = await _evaluate(
            self.page,
            _LOCATE_JS % {"selector": json.dumps(self.selector)},
            label="locate",
        )
        if not found:
            print("Edit area %r not found", self.selector)
            return None
        return self.selector

    async def insert_char(self, ch: str) -> None:
        await _emit_insert_text(self.page, ch)

    async def dispatch_enter(self) -> None:
        await _press_enter(self.page)

    async def dispatch_backspace(self) -> None:
        await _press_backspace(self.page)

    async def advance_caret(self) -> None:
        # CDP insertText already moves the caret; only DOM-append editors need this
        if self.arrow_after_insert:
            await _press_arrow_right(self.page)

    async def read_leading_indent(self) -> Optional[int]:
        if self.active_line_selector:
            expression = _READ_LINE_INDENT_JS % {
                "selector": json.dumps(self.active_line_selector),
                "unit": self.indent_unit,
            }
        else:
            expression = _READ_SELECTION_INDENT_JS % {"unit": self.indent_unit}
        value = await _evaluate(self.page, expression, label="readIndent")
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
