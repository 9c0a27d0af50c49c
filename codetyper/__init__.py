from __future__ import annotations
from .indent import analyze, IndentationAnalyzer, LinePlan
from .keyboard import (
    type_code,
    TypingScheduler,
    TypoModel,
    summarize_typing,
    save_typing_timeline_jpeg,
)
from .adapters import EditorAdapter, MemoryEditor, BrowserEditorAdapter
from .protocol import handle_message
from .relay import CodeRelay
from .errors import (
    CodeTyperError,
    TargetNotFound,
    SchedulerBusy,
    AdapterOperationFailed,
)

__all__ = [
    "analyze",
    "IndentationAnalyzer",
    "LinePlan",
    "type_code",
    "TypingScheduler",
    "TypoModel",
    "summarize_typing",
    "save_typing_timeline_jpeg",
    "EditorAdapter",
    "MemoryEditor",
    "BrowserEditorAdapter",
    "handle_message",
    "CodeRelay",
    "CodeTyperError",
    "TargetNotFound",
    "SchedulerBusy",
    "AdapterOperationFailed",
]
