"""External tool invocation.

Every subprocess the package spawns goes through `run_tool`, which maps the
ways a child process can fail onto `ToolMissing` and `QueryFailed`.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Sequence

from .errors import QueryFailed, ToolMissing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolOutput:
    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_tool(argv: Sequence[str], timeout: float | None = None) -> ToolOutput:
    """Run `argv` to completion and return its decoded output.

    A non-zero exit is returned, not raised; callers decide what it means.
    Raises ToolMissing when the binary cannot be started and QueryFailed on
    timeout or when stdout is not valid UTF-8.
    """
    argv = tuple(str(a) for a in argv)
    tool = argv[0]
    logger.debug(f"Running {' '.join(argv)}")
    try:
        proc = subprocess.run(argv, capture_output=True, timeout=timeout, check=False)
    except (FileNotFoundError, PermissionError) as e:
        raise ToolMissing(tool, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise QueryFailed(tool, None, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ToolMissing(tool, str(e)) from e

    try:
        stdout = proc.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise QueryFailed(tool, proc.returncode, f"undecodable output: {e}") from e
    stderr = proc.stderr.decode("utf-8", errors="replace")
    return ToolOutput(argv=argv, returncode=proc.returncode, stdout=stdout, stderr=stderr)
