"""
Steam icon fetcher.

Resolves an item's inventory image path to a CDN URL and downloads the icon.
"""
import logging

import httpx

from ..interfaces import IconFetcher, UpstreamLookupError
from .api import SteamWebApi, download_bytes

logger = logging.getLogger(__name__)

MAX_ICON_BYTES = 10 * 1024 * 1024


def icon_name_from_path(image_path: str) -> str:
    """
    Short icon name used by the icon path lookup.

    Example:
        "econ/items/axe/axe_ti9_helm" -> "axe_ti9_helm"
    """
    return image_path.strip().rsplit("/", 1)[-1]


class SteamIconFetcher(IconFetcher):
    """
    Fetches item icons from the Steam CDN.

    No retries: a failed item is retried on the next scheduled run.
    """

    def __init__(
        self,
        api: SteamWebApi,
        http_client: httpx.AsyncClient,
        cdn_base_url: str,
        icon_type: str = "",
    ):
        self._api = api
        self._http = http_client
        self._cdn_base_url = cdn_base_url.rstrip("/")
        self._icon_type = icon_type

    def build_icon_url(self, icon_path: str) -> str:
        return f"{self._cdn_base_url}/{icon_path.lstrip('/')}"

    async def fetch(self, image_path: str) -> bytes:
        """
        Fetch the raw icon bytes for an inventory image path.

        Args:
            image_path: Item's image_inventory value

        Returns:
            Raw image bytes as served by the CDN

        Raises:
            UpstreamLookupError: If the icon path cannot be resolved
            UpstreamDownloadError: If the download fails
        """
        icon_name = icon_name_from_path(image_path)
        if not icon_name:
            raise UpstreamLookupError(f"No icon name in image path '{image_path}'")

        icon_path = await self._api.get_item_icon_path(icon_name, self._icon_type)
        url = self.build_icon_url(icon_path)
        logger.debug("Downloading icon %s from %s", icon_name, url)

        return await download_bytes(self._http, url, max_bytes=MAX_ICON_BYTES)
