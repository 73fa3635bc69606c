"""
Pytest fixtures for icon sync tests.
"""
import io
from typing import Dict, List, Optional, Tuple, Union

import pytest
import vdf
from PIL import Image

from iconsync.adapters.interfaces import (
    AssetNotFoundError,
    AssetStore,
    IconFetcher,
    ItemRecord,
    StoreAccessError,
)
from iconsync.core.config import Settings, get_settings


# =============================================================================
# Test Image Fixtures
# =============================================================================

def make_png(size=(64, 32), mode="RGBA", color=(255, 0, 0, 255)) -> bytes:
    img = Image.new(mode, size, color=color)
    output = io.BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def transparent_png():
    """64x32 PNG: left half fully transparent, right half opaque red."""
    img = Image.new("RGBA", (64, 32), color=(0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (32, 0, 64, 32))
    output = io.BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def rgb_png():
    """Opaque blue PNG without an alpha channel."""
    return make_png(size=(100, 80), mode="RGB", color=(0, 0, 255))


@pytest.fixture
def palette_gif():
    """GIF whose palette index 0 is transparent."""
    img = Image.new("P", (40, 40), color=0)
    img.putpalette([255, 255, 255, 0, 200, 0] + [0, 0, 0] * 254)
    img.paste(1, (20, 0, 40, 40))
    output = io.BytesIO()
    img.save(output, format="GIF", transparency=0)
    return output.getvalue()


@pytest.fixture
def icon_png():
    """Small opaque icon served by fake upstreams."""
    return make_png(size=(32, 32), mode="RGBA", color=(10, 200, 30, 255))


# =============================================================================
# Schema Fixtures
# =============================================================================

def build_schema_text(items: List[Dict[str, str]]) -> str:
    """
    Build an items_game.vdf document.

    Each entry needs an "id"; "name" and "image_inventory" are optional.
    """
    entries = {"default": {"name": "default", "prefab": "default_item"}}
    for item in items:
        body = {"name": item.get("name", f"Item {item['id']}")}
        if "image_inventory" in item:
            body["image_inventory"] = item["image_inventory"]
        entries[str(item["id"])] = body
    return vdf.dumps({"items_game": {"items": entries}}, pretty=True)


@pytest.fixture
def schema_text():
    return build_schema_text


@pytest.fixture
def scenario_items():
    """The three-item catalog used by the end-to-end scenarios."""
    return [
        ItemRecord(id=1, name="No Icon", image_path=""),
        ItemRecord(id=2, name="Icon Two", image_path="econ/icon2.png"),
        ItemRecord(id=3, name="Icon Three", image_path="econ/icon3.png"),
    ]


# =============================================================================
# Test Doubles
# =============================================================================

class InMemoryAssetStore(AssetStore):
    """AssetStore keeping objects in a dict and recording every call."""

    def __init__(self, container: str = "test", objects: Optional[Dict[str, bytes]] = None):
        self._container = container
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.content_types: Dict[str, str] = {}
        self.exists_calls: List[str] = []
        self.put_calls: List[Tuple[str, str]] = []
        self.failing_keys: Dict[str, Exception] = {}

    @property
    def container(self) -> str:
        return self._container

    def _maybe_fail(self, key: str):
        if key in self.failing_keys:
            raise self.failing_keys[key]

    async def exists(self, key: str) -> bool:
        self.exists_calls.append(key)
        self._maybe_fail(key)
        return key in self.objects

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self.put_calls.append((key, content_type))
        self._maybe_fail(key)
        self.objects[key] = data
        self.content_types[key] = content_type

    async def get(self, key: str) -> bytes:
        self._maybe_fail(key)
        if key not in self.objects:
            raise AssetNotFoundError(key, self._container)
        return self.objects[key]

    async def list_keys(self) -> List[str]:
        return sorted(self.objects)

    async def health_check(self):
        return True, "in-memory"


class FakeIconFetcher(IconFetcher):
    """IconFetcher serving canned bytes or raising canned errors per image path."""

    def __init__(self, responses: Dict[str, Union[bytes, Exception]]):
        self.responses = responses
        self.calls: List[str] = []

    async def fetch(self, image_path: str) -> bytes:
        self.calls.append(image_path)
        response = self.responses[image_path]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def memory_store():
    return InMemoryAssetStore(container="cosmeticitemicons")


@pytest.fixture
def memory_store_factory():
    return InMemoryAssetStore


@pytest.fixture
def fake_fetcher_factory():
    return FakeIconFetcher


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def store_access_error():
    def _make(key: str) -> StoreAccessError:
        return StoreAccessError(key, "Simulated transport failure")
    return _make


# =============================================================================
# Settings Override Fixture
# =============================================================================

@pytest.fixture
def mock_settings(tmp_path, monkeypatch):
    """Settings pointing at a temporary local store and fake Steam hosts."""
    monkeypatch.setenv("ICONSYNC_STORE_MODE", "LOCAL")
    monkeypatch.setenv("ICONSYNC_LOCAL_STORE_ROOT", str(tmp_path / "store"))
    monkeypatch.setenv("ICONSYNC_STEAM_WEB_API_KEY", "test-key")
    monkeypatch.setenv("ICONSYNC_STEAM_API_BASE_URL", "https://api.steam.test")
    monkeypatch.setenv("ICONSYNC_STEAM_CDN_BASE_URL", "https://cdn.steam.test/apps/570")
    monkeypatch.setenv("ICONSYNC_RUN_ON_STARTUP", "false")

    get_settings.cache_clear()
    yield Settings(_env_file=None)
    get_settings.cache_clear()
