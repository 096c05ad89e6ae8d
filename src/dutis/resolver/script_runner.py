from __future__ import annotations

import tempfile
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..errors import QueryFailed, ScriptFailed, ToolMissing
from ..tools import run_tool


class ScriptRunner(Protocol):
    """Run script source text and return its stdout lines."""

    def run(self, source: str, args: Sequence[str]) -> list[str]:
        ...

@dataclass
class SubprocessScriptRunner:
    """Write the source to a temporary file and run it with an interpreter.

    The temporary file lives only for the duration of `run`. Any failure,
    including a missing interpreter, surfaces as ScriptFailed.
    """

    interpreter: str = "swift"
    script_suffix: str = ".swift"
    timeout: float | None = 60.0

    def run(self, source: str, args: Sequence[str]) -> list[str]:
        with tempfile.NamedTemporaryFile(
            "w",
            prefix="dutis-script.",
            suffix=self.script_suffix,
            encoding="utf-8",
        ) as fh:
            fh.write(source)
            fh.flush()
            try:
                out = run_tool([self.interpreter, fh.name, *args], timeout=self.timeout)
            except (ToolMissing, QueryFailed) as e:
                raise ScriptFailed(str(e)) from e

        if not out.ok:
            raise ScriptFailed(
                f"{self.interpreter} exited {out.returncode}: {out.stderr.strip() or out.stdout.strip()}"
            )
        return out.stdout.splitlines()
