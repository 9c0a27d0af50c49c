from __future__ import annotations
import abc
from typing import Any, Optional


class EditorAdapter(abc.ABC):
    """The live text surface the scheduler types into.

    Implementations report a missing surface by returning ``None`` from
    :meth:`find_active_region` rather than raising; the scheduler treats
    that as transient and retries. Keystroke methods may raise, the
    scheduler logs the failure and moves on.
    """

    @abc.abstractmethod
    async def find_active_region(self) -> Optional[Any]:
        """Locate (and focus) the active edit area; ``None`` when absent."""

    @abc.abstractmethod
    async def dispatch_enter(self) -> None:
        ...

    @abc.abstractmethod
    async def dispatch_backspace(self) -> None:
        ...

    @abc.abstractmethod
    async def insert_char(self, ch: str) -> None:
        ...

    @abc.abstractmethod
    async def read_leading_indent(self) -> Optional[int]:
        """Leading whitespace width of the caret line, ``None`` if unreadable."""

    async def advance_caret(self) -> None:
        """Nudge the caret past an inserted character.

        Only editors that do not advance the caret on programmatic insertion
        need this; the default does nothing.
        """
        return None
