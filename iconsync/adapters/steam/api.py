"""
Steam Web API client.

Thin wrapper over the two Web API calls the sync jobs need:
- IEconDOTA2_570/GetItemIconPath: inventory icon name -> CDN-relative path
- IEconItems_570/GetSchemaURL: current items_game.vdf download URL

The httpx.AsyncClient is owned by the caller and reused for every request of
a run.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ..interfaces import UpstreamDownloadError, UpstreamLookupError

logger = logging.getLogger(__name__)

ICON_PATH_ENDPOINT = "IEconDOTA2_570/GetItemIconPath/v1/"
SCHEMA_URL_ENDPOINT = "IEconItems_570/GetSchemaURL/v1/"


class SteamWebApi:
    """Client for the Steam Web API endpoints used by the sync jobs."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.steampowered.com",
    ):
        self._http = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def _get_result(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Web API endpoint and return its "result" object.

        Raises:
            UpstreamLookupError: On transport failure, non-2xx status, or an
                unexpected response body
        """
        url = f"{self._base_url}/{endpoint}"
        query = {"key": self._api_key, "format": "json", **params}

        try:
            response = await self._http.get(url, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamLookupError(
                f"{endpoint} returned HTTP {e.response.status_code}", e
            )
        except httpx.HTTPError as e:
            raise UpstreamLookupError(f"{endpoint} request failed: {str(e)}", e)

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamLookupError(f"{endpoint} returned invalid JSON", e)

        result = body.get("result") if isinstance(body, dict) else None
        if not isinstance(result, dict):
            raise UpstreamLookupError(f"{endpoint} response has no result object")
        return result

    async def get_item_icon_path(self, icon_name: str, icon_type: str = "") -> str:
        """
        Resolve an inventory icon name to its CDN-relative path.

        Args:
            icon_name: Short icon name (last segment of image_inventory)
            icon_type: Optional icon variant ("", "large", "ingame")

        Returns:
            Relative path on the CDN, e.g. "icons/econ/items/axe/helm.hash.png"
        """
        if not icon_name:
            raise UpstreamLookupError("Cannot resolve an empty icon name")

        params = {"iconname": icon_name}
        if icon_type:
            params["icontype"] = icon_type

        result = await self._get_result(ICON_PATH_ENDPOINT, params)
        path = result.get("path")
        if not path:
            raise UpstreamLookupError(f"No icon path returned for '{icon_name}'")
        return path

    async def get_schema_url(self) -> str:
        """Get the download URL of the current items_game.vdf."""
        result = await self._get_result(SCHEMA_URL_ENDPOINT, {})
        url = result.get("items_game_url")
        if not url:
            raise UpstreamLookupError("No items_game_url returned")
        return url


async def download_bytes(
    http_client: httpx.AsyncClient,
    url: str,
    max_bytes: Optional[int] = None,
) -> bytes:
    """
    Download a full payload.

    Raises:
        UpstreamDownloadError: On transport failure, non-2xx status, empty
            body, or a body larger than max_bytes
    """
    try:
        response = await http_client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise UpstreamDownloadError(url, f"HTTP {e.response.status_code}", e)
    except httpx.HTTPError as e:
        raise UpstreamDownloadError(url, f"Download failed ({type(e).__name__})", e)

    data = response.content
    if not data:
        raise UpstreamDownloadError(url, "Empty response body")
    if max_bytes is not None and len(data) > max_bytes:
        raise UpstreamDownloadError(url, f"Response exceeds {max_bytes} bytes")
    return data
