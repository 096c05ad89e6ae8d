from .bundle_scanner import BundleScanner
from .document_types import find_declaring_apps, read_declared_extensions

__all__ = ["BundleScanner", "find_declaring_apps", "read_declared_extensions"]
