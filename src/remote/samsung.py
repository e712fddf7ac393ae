"""
Samsung Tizen remote adapter (WebSocket on port 8001)

Each keypress opens its own socket, sends one ms.remote.control frame,
waits briefly so the frame is flushed, then closes.
"""

import asyncio
import base64
import logging
from typing import Dict, Optional, Any

import aiohttp

from http_helper import create_device_session

from .base import ProtocolAdapter
from .errors import RemoteUnreachable
from .models import CommandResult, Device, RemoteAction, Vendor

logger = logging.getLogger(__name__)

SAMSUNG_HINT = ('Make sure your Samsung TV is on and "Remote Access" is enabled in '
                'Settings > General > Network')

REMOTE_CHANNEL = "/api/v2/channels/samsung.remote.control"


def build_key_frame(key: str, cmd: str = "Click") -> Dict[str, Any]:
    return {
        "method": "ms.remote.control",
        "params": {
            "Cmd": cmd,
            "DataOfCmd": key,
            "Option": "false",
            "TypeOfRemote": "SendRemoteKey",
        },
    }


class SamsungAdapter(ProtocolAdapter):
    """Samsung remote control over an ephemeral WebSocket per key"""

    vendor = Vendor.SAMSUNG

    def __init__(self, config: Optional[Dict] = None):
        config = config or {}
        self.port = config.get('port', 8001)
        self.request_timeout = config.get('request_timeout', 5)
        self.close_delay = config.get('close_delay_ms', 100) / 1000.0
        self.remote_name = config.get('remote_name', 'TV Remote Gateway')

    def ws_url(self, ip: str) -> str:
        return f"ws://{ip}:{self.port}{REMOTE_CHANNEL}"

    def _ws_params(self, token: Optional[str]) -> Dict[str, str]:
        params = {"name": base64.b64encode(self.remote_name.encode()).decode()}
        if token:
            params["token"] = token
        return params

    async def _send_frame(self, ip: str, frame: Dict[str, Any], token: Optional[str]) -> CommandResult:
        """Open, send, wait for the flush, close; the socket is released on every path"""
        try:
            async with create_device_session(self.request_timeout) as session:
                async with session.ws_connect(self.ws_url(ip), params=self._ws_params(token)) as ws:
                    await ws.send_json(frame)
                    await asyncio.sleep(self.close_delay)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Samsung WebSocket error for {ip}: {e!r}")
            raise RemoteUnreachable(f"Failed to connect to Samsung TV at {ip}: {e}",
                                    hint=SAMSUNG_HINT) from e
        return CommandResult(success=True, details={"platform": "samsung"})

    async def keypress(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Samsung keypress: {key} to {ip}")
        return await self._send_frame(ip, build_key_frame(key), token)

    async def key_down(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Samsung key press-and-hold: {key} to {ip}")
        return await self._send_frame(ip, build_key_frame(key, "Press"), token)

    async def key_up(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Samsung key release: {key} to {ip}")
        return await self._send_frame(ip, build_key_frame(key, "Release"), token)

    async def device_info(self, ip: str) -> Dict[str, Any]:
        url = f"http://{ip}:{self.port}/api/v2/"
        try:
            async with create_device_session(self.request_timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise RemoteUnreachable(f"Samsung TV at {ip} answered HTTP {response.status}",
                                                hint=SAMSUNG_HINT)
                    info = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.error(f"Samsung device info from {ip} failed: {e!r}")
            raise RemoteUnreachable(f"Failed to get Samsung device info from {ip}: {e}",
                                    hint=SAMSUNG_HINT) from e
        if not isinstance(info, dict):
            raise RemoteUnreachable(f"Unexpected device info from Samsung TV at {ip}", hint=SAMSUNG_HINT)
        return info

    async def probe(self, ip: str) -> Device:
        info = await self.device_info(ip)
        details = info.get("device")
        if not isinstance(details, dict):
            details = {}
        return Device(
            ip=ip,
            name=details.get("name") or info.get("name") or "Samsung TV",
            model=details.get("modelName") or "Unknown",
            vendor=Vendor.SAMSUNG,
            serial=details.get("id") or info.get("id"),
        )
