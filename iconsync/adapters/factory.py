"""
Adapter factory for creating mode-appropriate adapters.

Creates LOCAL or S3 stores based on configuration. Adapters are built once
per job run from clients the caller owns; nothing here is cached globally.
"""
from dataclasses import dataclass
from typing import Any, Optional

import boto3
import httpx

from ..core.config import Settings, StoreMode
from .imaging import JpegImageTranscoder
from .interfaces import AssetStore, IconFetcher, ImageTranscoder, SchemaParser
from .local import LocalAssetStore
from .s3 import S3AssetStore
from .schema_parser import VdfSchemaParser
from .steam import SteamIconFetcher, SteamWebApi


@dataclass
class SyncAdapters:
    """Everything a job run needs, built once and passed down explicitly."""
    schema_store: AssetStore
    icon_store: AssetStore
    steam_api: SteamWebApi
    fetcher: IconFetcher
    transcoder: ImageTranscoder
    parser: SchemaParser
    http_client: httpx.AsyncClient


def create_s3_client(settings: Settings) -> Any:
    """Create a boto3 S3 client; credentials come from the default chain."""
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
    )


def create_store(
    settings: Settings,
    container: str,
    s3_client: Optional[Any] = None,
) -> AssetStore:
    """
    Create a store bound to one container.

    Args:
        settings: Current settings
        container: Logical container name
        s3_client: Shared boto3 client (S3 mode only; created when omitted)
    """
    if settings.STORE_MODE == StoreMode.LOCAL:
        return LocalAssetStore(root=settings.LOCAL_STORE_ROOT, container=container)
    elif settings.STORE_MODE == StoreMode.S3:
        client = s3_client or create_s3_client(settings)
        return S3AssetStore(client, bucket=settings.bucket_for(container), container=container)
    else:
        raise ValueError(f"Unknown store mode: {settings.STORE_MODE}")


def create_adapters(
    settings: Settings,
    http_client: httpx.AsyncClient,
    s3_client: Optional[Any] = None,
) -> SyncAdapters:
    """
    Build the adapters for one run.

    Args:
        settings: Current settings
        http_client: HTTP client shared by every Steam call of the run
        s3_client: Shared boto3 client (S3 mode only)

    Returns:
        SyncAdapters for the configured store mode
    """
    if settings.STORE_MODE == StoreMode.S3 and s3_client is None:
        s3_client = create_s3_client(settings)

    steam_api = SteamWebApi(
        http_client,
        api_key=settings.STEAM_WEB_API_KEY,
        base_url=settings.STEAM_API_BASE_URL,
    )

    return SyncAdapters(
        schema_store=create_store(settings, settings.SCHEMA_CONTAINER, s3_client),
        icon_store=create_store(settings, settings.ICON_CONTAINER, s3_client),
        steam_api=steam_api,
        fetcher=SteamIconFetcher(
            steam_api,
            http_client,
            cdn_base_url=settings.STEAM_CDN_BASE_URL,
            icon_type=settings.ICON_TYPE,
        ),
        transcoder=JpegImageTranscoder(
            quality=settings.JPEG_QUALITY,
            max_image_dimension=settings.MAX_IMAGE_DIMENSION,
        ),
        parser=VdfSchemaParser(),
        http_client=http_client,
    )
