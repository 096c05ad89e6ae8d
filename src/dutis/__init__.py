"""dutis — inspect installed macOS applications and set default handlers.

Scans an applications directory for bundle identifiers in parallel, recommends
applications for a file suffix via Launch Services, and binds a chosen
application as default handler for a suffix through duti.

Public API:
- DutisConfig
- BundleScanner
- ContentTypeResolver
- DefaultHandlerAssigner
- MetadataProbe
"""

from .assigner import DefaultHandlerAssigner
from .config import DutisConfig, load_config
from .probe.metadata import MetadataProbe
from .resolver.content_type import ContentTypeResolver
from .scanner.bundle_scanner import BundleScanner

__all__ = [
    "BundleScanner",
    "ContentTypeResolver",
    "DefaultHandlerAssigner",
    "DutisConfig",
    "MetadataProbe",
    "load_config",
]
