from __future__ import annotations


class CodeTyperError(RuntimeError):
    """Base class for errors surfaced by codetyper."""


class TargetNotFound(CodeTyperError):
    """The live edit area could not be located."""


class SchedulerBusy(CodeTyperError):
    """A typing session is already running against this adapter."""


class AdapterOperationFailed(CodeTyperError):
    """A single keystroke or read against the edit surface failed.

    The scheduler logs these and moves on to the next unit.
    """

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(f"{operation} failed" + (f": {message}" if message else ""))
