"""Typed errors raised by the discovery, recommendation and assignment layers.

Every fatal path ends in one of these; the CLI decides whether to abort,
report and continue, or re-prompt.
"""
from __future__ import annotations

from pathlib import Path


class DutisError(Exception):
    """Base class for all errors surfaced to the caller."""


class ToolMissing(DutisError):
    """A required external tool is not on PATH or cannot be executed."""

    def __init__(self, tool: str, detail: str = "") -> None:
        self.tool = tool
        self.detail = detail
        msg = f"Required tool not found: {tool}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class QueryFailed(DutisError):
    """An external tool ran but exited non-zero, timed out, or printed garbage."""

    def __init__(self, tool: str, returncode: int | None, detail: str = "") -> None:
        self.tool = tool
        self.returncode = returncode
        self.detail = detail
        status = f"exit {returncode}" if returncode is not None else "no exit status"
        msg = f"{tool} failed ({status})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ScanError(DutisError):
    """The application directory could not be listed."""

    def __init__(self, directory: str | Path, detail: str = "") -> None:
        self.directory = Path(directory)
        self.detail = detail
        super().__init__(f"Cannot list application directory {self.directory}: {detail}")


class ScriptFailed(DutisError):
    """The embedded role-handler script could not be run."""


class AssignmentFailed(DutisError):
    """duti reported a failure while binding a handler."""

    def __init__(self, type_identifier: str, suffix: str, detail: str = "") -> None:
        self.type_identifier = type_identifier
        self.suffix = suffix
        self.detail = detail
        msg = f"Failed to set {type_identifier} as default for {suffix}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class NameNotFound(DutisError):
    """The selected display name is not in the application index."""

    def __init__(self, name: str, suggestions: list[str] | None = None) -> None:
        self.name = name
        self.suggestions = list(suggestions or [])
        super().__init__(f"Application {name!r} not found")


class UnknownGroup(DutisError):
    """A suffix group name that is neither built in nor configured."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Unknown suffix group {name!r}. Available: {', '.join(available)}")
