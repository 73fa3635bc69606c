"""
Abstract interfaces for icon sync adapters.

These interfaces define the contracts the sync pipeline depends on. Both the
LOCAL and S3 store modes implement AssetStore; the Steam adapters implement
IconFetcher and the Pillow adapter implements ImageTranscoder.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


ICON_CONTENT_TYPE = "image/jpg"
SCHEMA_CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class ItemRecord:
    """
    A cosmetic item from the game schema.

    Attributes:
        id: Stable numeric definition index, used as the storage key
        name: Internal item name
        image_path: Inventory image path (e.g. "econ/items/axe/axe_helm"),
                    empty when the item has no icon
    """
    id: int
    name: str
    image_path: str = ""

    @property
    def icon_key(self) -> str:
        """Storage key of this item's icon."""
        return f"{self.id}.jpg"

    @property
    def has_image(self) -> bool:
        return bool(self.image_path and self.image_path.strip())


@dataclass
class TranscodedImage:
    """
    Transcoded icon ready for storage.

    Attributes:
        data: JPEG image data as bytes
        width: Image width in pixels
        height: Image height in pixels
        source_format: Detected source format (e.g., "PNG")
        file_size: Size of data in bytes
    """
    data: bytes
    width: int
    height: int
    source_format: str
    file_size: int = field(default=0, init=False)

    def __post_init__(self):
        self.file_size = len(self.data)


class AssetStore(ABC):
    """
    Abstract interface for one container of the durable object store.

    Implementations:
    - LocalAssetStore: Directory on the local filesystem
    - S3AssetStore: S3 bucket accessed through boto3
    """

    @property
    @abstractmethod
    def container(self) -> str:
        """Logical container name this store is bound to."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check whether an object exists.

        Args:
            key: Object key (e.g. "1234.jpg")

        Returns:
            True if the object exists, False otherwise

        Raises:
            StoreAccessError: On transport failure
        """
        pass

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Write an object.

        Concurrent writers to the same key are tolerated; the last write wins.

        Args:
            key: Object key
            data: Object bytes
            content_type: MIME type recorded with the object

        Raises:
            StoreAccessError: On transport failure
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """
        Read an object.

        Raises:
            AssetNotFoundError: If the object does not exist
            StoreAccessError: On transport failure
        """
        pass

    @abstractmethod
    async def list_keys(self) -> List[str]:
        """List all object keys in the container, sorted."""
        pass

    @abstractmethod
    async def health_check(self) -> Tuple[bool, str]:
        """
        Check if the store is reachable.

        Returns:
            Tuple of (is_healthy, status_message)
        """
        pass


class IconFetcher(ABC):
    """Abstract interface for retrieving an item's source icon."""

    @abstractmethod
    async def fetch(self, image_path: str) -> bytes:
        """
        Fetch the raw icon bytes for an inventory image path.

        Raises:
            UpstreamLookupError: If the icon path cannot be resolved
            UpstreamDownloadError: If the icon cannot be downloaded
        """
        pass


class ImageTranscoder(ABC):
    """Abstract interface for converting source icons to the stored format."""

    @abstractmethod
    async def transcode(self, data: bytes) -> TranscodedImage:
        """
        Transcode a source image.

        Raises:
            DecodeError: If the input cannot be decoded as an image
        """
        pass

    @abstractmethod
    async def health_check(self) -> Tuple[bool, str]:
        pass


class SchemaParser(ABC):
    """Abstract interface for turning a schema document into item records."""

    @abstractmethod
    def parse(self, lines: Sequence[str]) -> List[ItemRecord]:
        """
        Parse the full schema document.

        Args:
            lines: Every line of the document, in order

        Returns:
            Item records in schema order

        Raises:
            SchemaParseError: If the document is malformed
        """
        pass


# Custom exceptions for adapters

class AdapterError(Exception):
    """Base exception for adapter errors."""
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class SchemaUnavailableError(AdapterError):
    """Raised when the schema document cannot be retrieved."""
    error_code = "SCHEMA_UNAVAILABLE"


class SchemaParseError(AdapterError):
    """Raised when the schema document cannot be parsed."""
    error_code = "SCHEMA_PARSE_FAILED"


class UpstreamLookupError(AdapterError):
    """Raised when an upstream path/URL resolution call fails."""
    error_code = "UPSTREAM_LOOKUP_FAILED"


class UpstreamDownloadError(AdapterError):
    """Raised when downloading from upstream fails."""
    error_code = "UPSTREAM_DOWNLOAD_FAILED"

    def __init__(self, url: str, message: str, original_error: Exception = None):
        self.url = url
        super().__init__(f"{message}: {url}", original_error)


class DecodeError(AdapterError):
    """Raised when image decoding fails."""
    error_code = "IMAGE_DECODE_FAILED"


class StoreAccessError(AdapterError):
    """Raised when store access fails."""
    error_code = "STORE_ACCESS_FAILED"

    def __init__(self, key: str, message: str, original_error: Exception = None):
        self.key = key
        super().__init__(f"{message}: {key}", original_error)


class AssetNotFoundError(StoreAccessError):
    """Raised when a requested object does not exist."""
    error_code = "ASSET_NOT_FOUND"

    def __init__(self, key: str, container: str):
        self.container = container
        super().__init__(key, f"Object not found in container '{container}'")
