"""
Adapter interfaces and implementations for icon sync.

Adapters provide abstraction layers for:
- AssetStore: Object store container (local filesystem or S3)
- IconFetcher: Resolves and downloads source icons
- ImageTranscoder: Converts source icons to JPEG
- SchemaParser: Turns the schema document into ItemRecords
"""
from .interfaces import (
    AdapterError,
    AssetNotFoundError,
    AssetStore,
    DecodeError,
    ICON_CONTENT_TYPE,
    IconFetcher,
    ImageTranscoder,
    ItemRecord,
    SCHEMA_CONTENT_TYPE,
    SchemaParseError,
    SchemaParser,
    SchemaUnavailableError,
    StoreAccessError,
    TranscodedImage,
    UpstreamDownloadError,
    UpstreamLookupError,
)

__all__ = [
    "AssetStore",
    "IconFetcher",
    "ImageTranscoder",
    "SchemaParser",
    "ItemRecord",
    "TranscodedImage",
    "ICON_CONTENT_TYPE",
    "SCHEMA_CONTENT_TYPE",
    "AdapterError",
    "AssetNotFoundError",
    "DecodeError",
    "SchemaParseError",
    "SchemaUnavailableError",
    "StoreAccessError",
    "UpstreamDownloadError",
    "UpstreamLookupError",
]
