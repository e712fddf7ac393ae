from __future__ import annotations

import time

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from config_loader import get_default_config

DEVICE_INFO_XML = """<?xml version="1.0" encoding="UTF-8" ?>
<device-info>
  <udn>29380007-0800-1025-80a4-d83134a8c2b1</udn>
  <serial-number>X004000AAAAA</serial-number>
  <model-name>Roku Ultra</model-name>
  <friendly-device-name>Living Room Roku</friendly-device-name>
  <power-mode>PowerOn</power-mode>
</device-info>
"""

APPS_XML = """<?xml version="1.0" encoding="UTF-8" ?>
<apps>
  <app id="12" type="appl" version="4.2.81179053">Netflix</app>
  <app id="837" type="appl" version="2.19.79">YouTube</app>
  <app id="tvinput.hdmi1" type="tvin" version="1.0.0">Blu-ray player</app>
</apps>
"""


class FakeRoku:
    """Minimal Roku ECP endpoint recording every request it receives"""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str, float]] = []
        self.keypress_status = 200
        self.device_info_xml = DEVICE_INFO_XML
        self.apps_xml = APPS_XML

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/keypress/{key}", self.command)
        app.router.add_post("/keydown/{key}", self.command)
        app.router.add_post("/keyup/{key}", self.command)
        app.router.add_post("/launch/{app_id}", self.command)
        app.router.add_post("/search/browse", self.command)
        app.router.add_get("/query/device-info", self.device_info)
        app.router.add_get("/query/apps", self.apps)
        app.router.add_get("/query/icon/{app_id}", self.icon)
        return app

    def _record(self, request: web.Request) -> None:
        self.requests.append((request.method, request.raw_path, time.monotonic()))

    async def command(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(status=self.keypress_status)

    async def device_info(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(text=self.device_info_xml, content_type="text/xml")

    async def apps(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(text=self.apps_xml, content_type="text/xml")

    async def icon(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(body=b"\x89PNG-icon", content_type="image/jpeg")

    @property
    def paths(self) -> list[str]:
        return [path for _, path, _ in self.requests]


@pytest.fixture
async def fake_roku():
    roku = FakeRoku()
    server = TestServer(roku.app(), host="127.0.0.1")
    await server.start_server()
    roku.port = server.port
    yield roku
    await server.close()


@pytest.fixture
def config(tmp_path):
    cfg = get_default_config()
    cfg["registry"]["file"] = str(tmp_path / "saved_devices.json")
    cfg["api"]["static_dir"] = None
    cfg["network"]["request_timeout"] = 2
    return cfg
