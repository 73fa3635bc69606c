"""
Steam adapter implementations.

- SteamWebApi: icon path and schema URL lookups
- SteamIconFetcher: resolves and downloads item icons from the CDN
"""
from .api import SteamWebApi, download_bytes
from .fetcher import SteamIconFetcher, icon_name_from_path

__all__ = ["SteamWebApi", "SteamIconFetcher", "download_bytes", "icon_name_from_path"]
