from .metadata import BUNDLE_IDENTIFIER_ATTR, CONTENT_TYPE_ATTR, MetadataProbe

__all__ = ["BUNDLE_IDENTIFIER_ATTR", "CONTENT_TYPE_ATTR", "MetadataProbe"]
