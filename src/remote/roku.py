"""
Roku External Control Protocol (ECP) adapter

ECP is plain HTTP on port 8060: keypresses, launches and searches are
zero-length POSTs, queries return XML documents.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Any, Tuple
from urllib.parse import quote

import aiohttp
from yarl import URL

from http_helper import create_device_session

from .base import ProtocolAdapter
from .errors import InvalidTarget, RemoteUnreachable
from .models import CommandResult, Device, InstalledApp, RemoteAction, Vendor

logger = logging.getLogger(__name__)

ROKU_HINT = ('Make sure the Roku is on and "Control by mobile apps" is enabled in '
             'Settings > System > Advanced system settings')

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


def parse_device_info(xml_text: str) -> Dict[str, Any]:
    """Flatten a /query/device-info document into a key/value record"""
    root = ET.fromstring(xml_text)
    return {child.tag: (child.text or "").strip() for child in root}


def parse_apps(xml_text: str) -> List[InstalledApp]:
    """Parse a /query/apps document; zero, one or many <app> elements all yield a list"""
    root = ET.fromstring(xml_text)
    apps = []
    for app in root.iter("app"):
        apps.append(InstalledApp(
            id=app.get("id", ""),
            name=(app.text or "").strip(),
            type=app.get("type"),
            version=app.get("version"),
        ))
    return apps


def device_name_from_info(info: Dict[str, Any]) -> str:
    return info.get("friendly-device-name") or info.get("model-name") or "Roku Device"


class RokuAdapter(ProtocolAdapter):
    """Roku ECP over HTTP"""

    vendor = Vendor.ROKU

    def __init__(self, config: Optional[Dict] = None):
        config = config or {}
        self.port = config.get('port', 8060)
        self.request_timeout = config.get('request_timeout', 5)
        self.text_input_delay = config.get('text_input_delay_ms', 50) / 1000.0

    def base_url(self, ip: str) -> str:
        return f"http://{ip}:{self.port}"

    def _url(self, ip: str, path: str) -> URL:
        # Paths are pre-encoded; keep yarl from re-quoting escapes like %21
        return URL(self.base_url(ip) + path, encoded=True)

    async def _post(self, session: aiohttp.ClientSession, ip: str, path: str) -> CommandResult:
        """
        POST an ECP command with an empty body
        Non-2xx responses are logged but still reported as success; the TV
        firmware decides the actual effect
        """
        try:
            async with session.post(self._url(ip, path), data=b"",
                                    headers={'Content-Length': '0'}) as response:
                if response.status < 200 or response.status >= 300:
                    logger.warning(f"Roku {ip} answered HTTP {response.status} for POST {path}")
                return CommandResult(success=True, status=response.status)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Roku POST {path} to {ip} failed: {e!r}")
            raise RemoteUnreachable(f"Failed to reach Roku at {ip}: {e}", hint=ROKU_HINT) from e

    async def _command(self, ip: str, path: str) -> CommandResult:
        async with create_device_session(self.request_timeout) as session:
            return await self._post(session, ip, path)

    async def _get(self, ip: str, path: str) -> Tuple[int, bytes, str]:
        try:
            async with create_device_session(self.request_timeout) as session:
                async with session.get(self._url(ip, path)) as response:
                    body = await response.read()
                    return response.status, body, response.headers.get('Content-Type', '')
        except TRANSPORT_ERRORS as e:
            logger.error(f"Roku GET {path} from {ip} failed: {e!r}")
            raise RemoteUnreachable(f"Failed to reach Roku at {ip}: {e}", hint=ROKU_HINT) from e

    async def _get_xml(self, ip: str, path: str, parser):
        status, body, _ = await self._get(ip, path)
        if status != 200:
            raise RemoteUnreachable(f"Roku at {ip} answered HTTP {status} for {path}", hint=ROKU_HINT)
        try:
            return parser(body.decode('utf-8', errors='replace'))
        except ET.ParseError as e:
            raise RemoteUnreachable(f"Unexpected response from {ip} for {path}: {e}") from e

    # ================== COMMANDS ==================

    async def keypress(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Sending keypress: {key} to {ip}")
        return await self._command(ip, f"/keypress/{key}")

    async def key_down(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Sending keydown: {key} to {ip}")
        return await self._command(ip, f"/keydown/{key}")

    async def key_up(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        key = self.token_for(action)
        logger.info(f"Sending keyup: {key} to {ip}")
        return await self._command(ip, f"/keyup/{key}")

    async def launch(self, ip: str, app_id: str) -> CommandResult:
        if not app_id:
            raise InvalidTarget("App id required")
        logger.info(f"Launching app {app_id} on {ip}")
        return await self._command(ip, f"/launch/{quote(str(app_id), safe='')}")

    async def search(self, ip: str, keyword: str) -> CommandResult:
        logger.info(f"Searching '{keyword}' on {ip}")
        return await self._command(ip, f"/search/browse?keyword={quote(keyword or '', safe='')}")

    async def input_text(self, ip: str, text: str) -> CommandResult:
        """
        Type text one Lit_ keypress per character
        The fixed delay between characters is required: Roku drops or
        reorders characters sent back to back
        """
        logger.info(f"Sending {len(text)} characters of text input to {ip}")
        result = CommandResult(success=True, details={'characters': 0})
        async with create_device_session(self.request_timeout) as session:
            for char in text:
                sent = await self._post(session, ip, f"/keypress/Lit_{quote(char, safe='')}")
                result.status = sent.status
                result.details['characters'] += 1
                await asyncio.sleep(self.text_input_delay)
        return result

    # ================== QUERIES ==================

    async def device_info(self, ip: str) -> Dict[str, Any]:
        return await self._get_xml(ip, "/query/device-info", parse_device_info)

    async def probe(self, ip: str) -> Device:
        info = await self.device_info(ip)
        return Device(
            ip=ip,
            name=device_name_from_info(info),
            model=info.get("model-name") or "Unknown",
            vendor=Vendor.ROKU,
            serial=info.get("serial-number") or None,
        )

    async def list_apps(self, ip: str) -> List[InstalledApp]:
        return await self._get_xml(ip, "/query/apps", parse_apps)

    async def app_icon(self, ip: str, app_id: str) -> Tuple[bytes, str]:
        """Return the raw icon bytes and the content type the TV supplied"""
        status, body, content_type = await self._get(ip, f"/query/icon/{quote(str(app_id), safe='')}")
        if status != 200:
            logger.warning(f"Roku {ip} answered HTTP {status} for icon {app_id}")
        return body, content_type or 'image/png'
