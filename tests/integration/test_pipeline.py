"""
Integration tests for the sync jobs.

Runs the real adapters against a local store and a mocked Steam upstream.
"""
import io

import httpx
import pytest
from PIL import Image

from iconsync.adapters.interfaces import SchemaUnavailableError
from iconsync.adapters.local import LocalAssetStore
from iconsync.services.icon_sync_service import ItemOutcome
from iconsync.services.jobs import run_icon_sync, run_schema_refresh

SCHEMA_URL = "https://cdn.steam.test/apps/570/scripts/items/items_game.latest.txt"


class FakeSteam:
    """Mock upstream serving icon path lookups, icons and the schema."""

    def __init__(self, icons, schema_body=b""):
        self.icons = icons
        self.schema_body = schema_body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("GetItemIconPath/v1/"):
            name = request.url.params["iconname"]
            if name not in self.icons:
                return httpx.Response(200, json={"result": {"status": 2}})
            return httpx.Response(200, json={"result": {"status": 1, "path": f"icons/econ/{name}"}})

        if path.endswith("GetSchemaURL/v1/"):
            return httpx.Response(200, json={"result": {"status": 1, "items_game_url": SCHEMA_URL}})

        if str(request.url) == SCHEMA_URL:
            return httpx.Response(200, content=self.schema_body)

        if path.startswith("/apps/570/icons/econ/"):
            name = path.rsplit("/", 1)[-1]
            if name in self.icons:
                return httpx.Response(200, content=self.icons[name])

        return httpx.Response(404)


@pytest.fixture
def schema_store(mock_settings):
    return LocalAssetStore(mock_settings.LOCAL_STORE_ROOT, mock_settings.SCHEMA_CONTAINER)


@pytest.fixture
def icon_store(mock_settings):
    return LocalAssetStore(mock_settings.LOCAL_STORE_ROOT, mock_settings.ICON_CONTAINER)


@pytest.fixture
def scenario_schema(schema_text):
    return schema_text([
        {"id": 1, "name": "No Icon"},
        {"id": 2, "name": "Icon Two", "image_inventory": "econ/icon2.png"},
        {"id": 3, "name": "Icon Three", "image_inventory": "econ/icon3.png"},
    ])


class TestIconSyncJob:
    """End-to-end icon sync against a local store."""

    @pytest.mark.asyncio
    async def test_scenario(
        self, mock_settings, schema_store, icon_store, scenario_schema,
        transparent_png, recording_sleep,
    ):
        await schema_store.put("items_game.vdf", scenario_schema.encode(), "text/plain")
        await icon_store.put("3.jpg", b"existing-icon", "image/jpg")
        steam = FakeSteam({"icon2.png": transparent_png, "icon3.png": transparent_png})

        async with httpx.AsyncClient(transport=httpx.MockTransport(steam)) as client:
            summary = await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)

        assert [r.outcome for r in summary.results] == [
            ItemOutcome.SKIPPED_EMPTY_PATH,
            ItemOutcome.STORED,
            ItemOutcome.SKIPPED_EXISTS,
        ]
        assert await icon_store.list_keys() == ["2.jpg", "3.jpg"]
        assert await icon_store.get("3.jpg") == b"existing-icon"
        assert await icon_store.get_content_type("2.jpg") == "image/jpg"
        assert recording_sleep.delays == [5.0, 0.5]

        img = Image.open(io.BytesIO(await icon_store.get("2.jpg"))).convert("RGB")
        assert img.size == (64, 32)
        assert max(img.getpixel((8, 16))) < 20

        lookups = [r for r in steam.requests if r.url.path.endswith("GetItemIconPath/v1/")]
        assert [r.url.params["iconname"] for r in lookups] == ["icon2.png"]
        assert all(r.url.params["key"] == "test-key" for r in lookups)

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(
        self, mock_settings, schema_store, icon_store, scenario_schema,
        transparent_png, recording_sleep,
    ):
        await schema_store.put("items_game.vdf", scenario_schema.encode(), "text/plain")
        steam = FakeSteam({"icon2.png": transparent_png, "icon3.png": transparent_png})

        async with httpx.AsyncClient(transport=httpx.MockTransport(steam)) as client:
            await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)
            snapshot = {key: await icon_store.get(key) for key in await icon_store.list_keys()}
            requests_after_first = len(steam.requests)

            summary = await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)

        assert snapshot.keys() == {"2.jpg", "3.jpg"}
        assert {key: await icon_store.get(key) for key in await icon_store.list_keys()} == snapshot
        assert len(steam.requests) == requests_after_first
        assert summary.count(ItemOutcome.SKIPPED_EXISTS) == 2

    @pytest.mark.asyncio
    async def test_unknown_icon_fails_only_that_item(
        self, mock_settings, schema_store, icon_store, schema_text,
        transparent_png, recording_sleep,
    ):
        schema = schema_text([
            {"id": 20, "image_inventory": "econ/missing"},
            {"id": 21, "image_inventory": "econ/present"},
        ])
        await schema_store.put("items_game.vdf", schema.encode(), "text/plain")
        steam = FakeSteam({"present": transparent_png})

        async with httpx.AsyncClient(transport=httpx.MockTransport(steam)) as client:
            summary = await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)

        assert [(r.item_id, r.outcome) for r in summary.results] == [
            (20, ItemOutcome.FAILED),
            (21, ItemOutcome.STORED),
        ]
        assert summary.failures[0].error_code == "UPSTREAM_LOOKUP_FAILED"
        assert await icon_store.list_keys() == ["21.jpg"]

    @pytest.mark.asyncio
    async def test_missing_schema_aborts_run(self, mock_settings, icon_store, recording_sleep):
        steam = FakeSteam({})

        async with httpx.AsyncClient(transport=httpx.MockTransport(steam)) as client:
            with pytest.raises(SchemaUnavailableError):
                await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)

        assert steam.requests == []
        assert await icon_store.list_keys() == []


class TestSchemaRefreshThenSync:

    @pytest.mark.asyncio
    async def test_refreshed_schema_drives_next_sync(
        self, mock_settings, schema_store, icon_store, scenario_schema,
        icon_png, recording_sleep,
    ):
        steam = FakeSteam(
            {"icon2.png": icon_png, "icon3.png": icon_png},
            schema_body=scenario_schema.encode(),
        )

        async with httpx.AsyncClient(transport=httpx.MockTransport(steam)) as client:
            size = await run_schema_refresh(mock_settings, http_client=client)
            summary = await run_icon_sync(mock_settings, http_client=client, sleep=recording_sleep)

        assert size == len(scenario_schema.encode())
        assert await schema_store.get_content_type("items_game.vdf") == "text/plain"
        assert summary.count(ItemOutcome.STORED) == 2
        assert await icon_store.list_keys() == ["2.jpg", "3.jpg"]
