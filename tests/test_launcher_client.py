"""Tests for the launcher API client, using httpx mock transports."""

import json

import httpx
import pytest

from gameres.models import FullPackage, GameBiz
from gameres.services import HttpClientService, LauncherClient, RemoteFetchError, get_game_profile


def resource_payload(retcode: int = 0) -> dict:
    return {
        "retcode": retcode,
        "message": "OK" if retcode == 0 else "invalid key",
        "data": {
            "game": {
                "latest": {
                    "version": "2.1.0",
                    "path": "https://cdn.example.com/StarRail_2.1.0.zip",
                    "size": "200",
                    "package_size": "100",
                    "segments": [],
                    "voice_packs": [
                        {"language": "ko-kr", "path": "https://cdn.example.com/Audio_Korean_2.1.0.zip",
                         "size": "20", "package_size": "10"},
                    ],
                },
                "diffs": [],
            },
            "pre_download_game": None,
        } if retcode == 0 else None,
    }


def make_client(handler) -> tuple[LauncherClient, HttpClientService]:
    http = HttpClientService(timeout=5.0, transport=httpx.MockTransport(handler))
    return LauncherClient(http), http


@pytest.mark.asyncio
async def test_fetches_and_decodes_resource() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=resource_payload())

    client, http = make_client(handler)
    async with http:
        resource = await client.get_launcher_game_resource(GameBiz.HKRPG_GLOBAL)

    assert requested == [get_game_profile(GameBiz.HKRPG_GLOBAL).resource_url]
    assert isinstance(resource.game.latest, FullPackage)
    assert str(resource.game.latest.version) == "2.1.0"
    assert resource.game.latest.voice_packs[0].name == "Audio_Korean_2.1.0.zip"


@pytest.mark.asyncio
async def test_non_zero_retcode_is_a_fetch_failure() -> None:
    client, http = make_client(lambda request: httpx.Response(200, json=resource_payload(retcode=-1)))

    async with http:
        with pytest.raises(RemoteFetchError) as exc_info:
            await client.get_launcher_game_resource(GameBiz.HK4E_CN)

    assert exc_info.value.retcode == -1
    assert "invalid key" in exc_info.value.message


@pytest.mark.asyncio
async def test_http_error_status_is_a_fetch_failure() -> None:
    client, http = make_client(lambda request: httpx.Response(503, text="unavailable"))

    async with http:
        with pytest.raises(RemoteFetchError) as exc_info:
            await client.get_launcher_game_resource(GameBiz.HK4E_CN)

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_error_is_a_fetch_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http = make_client(handler)
    async with http:
        with pytest.raises(RemoteFetchError) as exc_info:
            await client.get_launcher_game_resource(GameBiz.BH3_GLOBAL)

    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_invalid_json_is_a_fetch_failure() -> None:
    client, http = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

    async with http:
        with pytest.raises(RemoteFetchError):
            await client.get_launcher_game_resource(GameBiz.HK4E_GLOBAL)


def _drop_latest(game: dict) -> None:
    del game["latest"]


def _string_voice_pack(game: dict) -> None:
    game["latest"]["voice_packs"] = ["bogus"]


def _string_segment(game: dict) -> None:
    game["latest"]["path"] = ""
    game["latest"]["segments"] = ["https://cdn.example.com/StarRail_2.1.0.zip.001"]


def _numeric_diff(game: dict) -> None:
    game["diffs"] = [1]


def _numeric_path(game: dict) -> None:
    game["latest"]["path"] = 5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "corrupt",
    [_drop_latest, _string_voice_pack, _string_segment, _numeric_diff, _numeric_path],
)
async def test_malformed_document_is_a_fetch_failure(corrupt) -> None:
    payload = resource_payload()
    corrupt(payload["data"]["game"])
    client, http = make_client(lambda request: httpx.Response(200, content=json.dumps(payload).encode()))

    async with http:
        with pytest.raises(RemoteFetchError):
            await client.get_launcher_game_resource(GameBiz.HK4E_GLOBAL)


@pytest.mark.asyncio
async def test_each_call_is_attempted_once() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500)

    client, http = make_client(handler)
    async with http:
        with pytest.raises(RemoteFetchError):
            await client.get_launcher_game_resource(GameBiz.HKRPG_CN)

    assert calls == 1
