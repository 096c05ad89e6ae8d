from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from typing import Sequence

from ..config import DutisConfig
from ..errors import DutisError
from ..models import RecommendationList
from ..probe.metadata import MetadataProbe
from ..utils import normalize_suffix, short_app_path
from .role_handlers import RoleHandlerSource, SwiftRoleHandlerSource
from .script_runner import SubprocessScriptRunner

logger = logging.getLogger(__name__)

@dataclass
class ContentTypeResolver:
    """Recommend applications for a file suffix.

    The suffix is resolved to a content type by probing an empty temporary
    file, and the content type to applications through `handlers`.
    Recommendations are best-effort: every failure yields an empty list.
    """

    probe: MetadataProbe
    handlers: RoleHandlerSource = field(default_factory=SwiftRoleHandlerSource)
    app_url_prefix: str = "file:///Applications/"

    @classmethod
    def from_config(cls, cfg: DutisConfig, probe: MetadataProbe | None = None) -> "ContentTypeResolver":
        runner = SubprocessScriptRunner(interpreter=cfg.swift_bin, timeout=cfg.script_timeout)
        return cls(
            probe=probe or MetadataProbe(mdls_bin=cfg.mdls_bin, timeout=cfg.probe_timeout),
            handlers=SwiftRoleHandlerSource(runner=runner),
            app_url_prefix=cfg.app_url_prefix,
        )

    def content_type_for(self, suffix: str) -> str | None:
        """Content type the system infers for a file ending in `suffix`, or None."""
        suffix = normalize_suffix(suffix)
        with tempfile.NamedTemporaryFile(prefix="dutis-content.", suffix=suffix) as tmp:
            try:
                return self.probe.content_type(tmp.name)
            except DutisError as e:
                logger.warning(f"Cannot resolve content type for {suffix}: {e}")
                return None

    def recommend(self, suffix: str) -> RecommendationList:
        content_type = self.content_type_for(suffix)
        if content_type is None:
            return []
        return self.recommend_for_content_type(content_type)

    def recommend_for_content_type(self, content_type: str) -> RecommendationList:
        try:
            lines = self.handlers.handlers_for(content_type)
        except DutisError as e:
            logger.warning(f"No recommendations for {content_type}: {e}")
            return []

        apps: RecommendationList = []
        seen: set[str] = set()
        for line in lines:
            if not line.strip():
                continue
            app = short_app_path(line, self.app_url_prefix)
            if not app or app in seen:
                continue
            seen.add(app)
            apps.append(app)
        logger.debug(f"{len(apps)} handlers for {content_type}")
        return apps

    def recommend_common(self, suffixes: Sequence[str]) -> RecommendationList:
        """Applications recommended for every suffix, in the first suffix's order."""
        common: RecommendationList | None = None
        for suffix in suffixes:
            apps = self.recommend(suffix)
            if not apps:
                return []
            if common is None:
                common = apps
            else:
                keep = set(apps)
                common = [a for a in common if a in keep]
            if not common:
                return []
        return common or []
