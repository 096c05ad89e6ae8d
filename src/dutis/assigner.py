from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from typing import Iterable

from .config import DutisConfig
from .errors import AssignmentFailed, NameNotFound
from .models import ApplicationIndex, ApplicationRecord, AssignmentRequest, AssignmentResult
from .tools import run_tool
from .utils import normalize_suffix

logger = logging.getLogger(__name__)

# duti role scope covering viewer, editor, shell and every other role
ALL_ROLES = "all"

@dataclass
class DefaultHandlerAssigner:
    """Bind an application's type identifier as default handler for a suffix.

    Each assignment is one `duti -s` call. Re-assigning the same pair is
    harmless, so callers may retry; this class never does.
    """

    duti_bin: str = "duti"
    timeout: float | None = 30.0

    @classmethod
    def from_config(cls, cfg: DutisConfig) -> "DefaultHandlerAssigner":
        return cls(duti_bin=cfg.duti_bin)

    def assign(self, type_identifier: str, suffix: str) -> AssignmentRequest:
        """Raises AssignmentFailed on a non-zero exit and ToolMissing if duti is absent."""
        request = AssignmentRequest(type_identifier=type_identifier, suffix=normalize_suffix(suffix))
        logger.info(f"Set default application for {request.suffix} to {request.type_identifier}")
        out = run_tool(
            [self.duti_bin, "-s", request.type_identifier, request.suffix, ALL_ROLES],
            timeout=self.timeout,
        )
        if not out.ok:
            detail = out.stderr.strip() or f"exit {out.returncode}"
            raise AssignmentFailed(request.type_identifier, request.suffix, detail)
        return request

    def assign_by_name(self, index: ApplicationIndex, name: str, suffix: str) -> AssignmentRequest:
        return self.assign(lookup(index, name).type_identifier, suffix)

    def assign_group(self, type_identifier: str, suffixes: Iterable[str]) -> list[AssignmentResult]:
        """Assign every suffix in order; a failed suffix does not stop the rest."""
        results: list[AssignmentResult] = []
        for s in suffixes:
            try:
                req = self.assign(type_identifier, s)
            except AssignmentFailed as e:
                logger.warning(str(e))
                results.append(AssignmentResult(suffix=e.suffix, ok=False, error=e.detail))
                continue
            results.append(AssignmentResult(suffix=req.suffix, ok=True))
        return results

def lookup(index: ApplicationIndex, name: str) -> ApplicationRecord:
    """Find `name` in the index, falling back to a case-insensitive match.

    Raises NameNotFound with close matches as suggestions.
    """
    if name in index:
        return index[name]
    folded = {k.casefold(): v for k, v in index.items()}
    if name.casefold() in folded:
        return folded[name.casefold()]
    suggestions = difflib.get_close_matches(name, list(index), n=5, cutoff=0.6)
    raise NameNotFound(name, suggestions)
