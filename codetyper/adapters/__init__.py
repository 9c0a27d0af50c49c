from .base import EditorAdapter
from .memory import MemoryEditor
from .browser import BrowserEditorAdapter, EDITOR_PRESETS

__all__ = [
    "EditorAdapter",
    "MemoryEditor",
    "BrowserEditorAdapter",
    "EDITOR_PRESETS",
]
