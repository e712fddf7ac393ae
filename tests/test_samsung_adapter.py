from __future__ import annotations

import json

import pytest
from aiohttp import WSMsgType, web
from aiohttp.test_utils import TestServer

from remote.errors import RemoteUnreachable
from remote.models import RemoteAction, Vendor
from remote.samsung import SamsungAdapter

SAMSUNG_INFO = {
    "id": "uuid:0f3f2d5a",
    "name": "[TV] Samsung Q60",
    "device": {"name": "[TV] Bedroom", "modelName": "QN55Q60TAFXZA", "id": "uuid:0f3f2d5a"},
}


class FakeSamsung:
    def __init__(self) -> None:
        self.frames: list[dict] = []
        self.queries: list[dict] = []
        self.info_payload: object = SAMSUNG_INFO

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/v2/channels/samsung.remote.control", self.remote)
        app.router.add_get("/api/v2/", self.info)
        return app

    async def remote(self, request: web.Request) -> web.WebSocketResponse:
        self.queries.append(dict(request.query))
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                self.frames.append(json.loads(msg.data))
        return ws

    async def info(self, request: web.Request) -> web.Response:
        return web.json_response(self.info_payload)


@pytest.fixture
async def fake_samsung():
    tv = FakeSamsung()
    server = TestServer(tv.app(), host="127.0.0.1")
    await server.start_server()
    tv.port = server.port
    yield tv
    await server.close()


def _adapter(port: int) -> SamsungAdapter:
    return SamsungAdapter({"port": port, "request_timeout": 2, "close_delay_ms": 100})


async def test_keypress_sends_one_click_frame(fake_samsung) -> None:
    samsung = _adapter(fake_samsung.port)

    result = await samsung.keypress("127.0.0.1", RemoteAction.SELECT)

    assert result.success is True
    assert fake_samsung.frames == [{
        "method": "ms.remote.control",
        "params": {
            "Cmd": "Click",
            "DataOfCmd": "KEY_ENTER",
            "Option": "false",
            "TypeOfRemote": "SendRemoteKey",
        },
    }]


async def test_each_keypress_uses_its_own_socket(fake_samsung) -> None:
    samsung = _adapter(fake_samsung.port)

    await samsung.keypress("127.0.0.1", RemoteAction.UP)
    await samsung.keypress("127.0.0.1", RemoteAction.DOWN)

    assert [f["params"]["DataOfCmd"] for f in fake_samsung.frames] == ["KEY_UP", "KEY_DOWN"]
    assert len(fake_samsung.queries) == 2


async def test_token_is_passed_as_query_parameter(fake_samsung) -> None:
    samsung = _adapter(fake_samsung.port)

    await samsung.keypress("127.0.0.1", RemoteAction.HOME, token="12345678")
    await samsung.keypress("127.0.0.1", RemoteAction.HOME)

    assert fake_samsung.queries[0]["token"] == "12345678"
    assert "token" not in fake_samsung.queries[1]


async def test_key_hold_uses_press_and_release(fake_samsung) -> None:
    samsung = _adapter(fake_samsung.port)

    await samsung.key_down("127.0.0.1", RemoteAction.VOLUME_UP)
    await samsung.key_up("127.0.0.1", RemoteAction.VOLUME_UP)

    assert [f["params"]["Cmd"] for f in fake_samsung.frames] == ["Press", "Release"]


async def test_probe_reads_device_info(fake_samsung) -> None:
    samsung = _adapter(fake_samsung.port)

    device = await samsung.probe("127.0.0.1")

    assert device.vendor is Vendor.SAMSUNG
    assert device.name == "[TV] Bedroom"
    assert device.model == "QN55Q60TAFXZA"


async def test_connection_failure_carries_remote_access_hint() -> None:
    samsung = _adapter(9)

    with pytest.raises(RemoteUnreachable) as excinfo:
        await samsung.keypress("127.0.0.1", RemoteAction.POWER)

    assert "Remote Access" in excinfo.value.hint


@pytest.mark.parametrize("payload", [["not", "an", "object"], "ok", 42])
async def test_probe_rejects_non_object_device_info(fake_samsung, payload) -> None:
    fake_samsung.info_payload = payload
    samsung = _adapter(fake_samsung.port)

    with pytest.raises(RemoteUnreachable) as excinfo:
        await samsung.probe("127.0.0.1")

    assert "Remote Access" in excinfo.value.hint


async def test_probe_falls_back_when_device_field_is_not_an_object(fake_samsung) -> None:
    fake_samsung.info_payload = {"name": "[TV] Den", "device": "unavailable"}

    device = await _adapter(fake_samsung.port).probe("127.0.0.1")

    assert (device.name, device.model) == ("[TV] Den", "Unknown")
