"""
Protocol adapter interface shared by all TV vendors
"""

import logging
from typing import Dict, List, Optional, Any, Tuple

from .errors import UnsupportedAction
from .keymaps import KEY_MAPS, wire_token
from .models import CommandResult, Device, InstalledApp, RemoteAction, Vendor

logger = logging.getLogger(__name__)


class ProtocolAdapter:
    """
    Translates abstract remote actions into vendor network calls.

    Subclasses override the capabilities their protocol supports; anything
    left unimplemented reports UnsupportedAction for that vendor.
    """

    vendor: Vendor = None

    @property
    def key_map(self) -> Dict[RemoteAction, str]:
        return KEY_MAPS[self.vendor]

    def token_for(self, action: RemoteAction) -> str:
        return wire_token(self.vendor, action, self.key_map)

    def _unsupported(self, what: str) -> UnsupportedAction:
        return UnsupportedAction(f"{what} is not supported on {self.vendor.value}")

    async def keypress(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        raise self._unsupported("Keypress")

    async def key_down(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        raise self._unsupported("Key hold")

    async def key_up(self, ip: str, action: RemoteAction, token: Optional[str] = None) -> CommandResult:
        raise self._unsupported("Key hold")

    async def launch(self, ip: str, app_id: str) -> CommandResult:
        raise self._unsupported("App launch")

    async def search(self, ip: str, keyword: str) -> CommandResult:
        raise self._unsupported("Search")

    async def input_text(self, ip: str, text: str) -> CommandResult:
        raise self._unsupported("Text input")

    async def list_apps(self, ip: str) -> List[InstalledApp]:
        raise self._unsupported("App listing")

    async def app_icon(self, ip: str, app_id: str) -> Tuple[bytes, str]:
        raise self._unsupported("App icons")

    async def device_info(self, ip: str) -> Dict[str, Any]:
        raise self._unsupported("Device info")

    async def probe(self, ip: str) -> Device:
        """Fetch device info and describe the TV as a Device"""
        raise self._unsupported("Device probe")
