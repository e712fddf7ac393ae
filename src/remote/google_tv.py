"""
Google TV / Android TV placeholder adapter

The Android TV remote protocol (ports 6466/6467) needs a certificate
pairing handshake, which this gateway does not implement.
"""

from typing import Optional

from .base import ProtocolAdapter
from .errors import ProtocolNotImplemented
from .models import RemoteAction, Vendor

GOOGLE_TV_MESSAGE = "Google TV requires SSL certificate pairing which is not implemented yet."
GOOGLE_TV_HINT = "For now, use the official Google TV app on your phone"


def google_tv_not_implemented(what: str = "Google TV support") -> ProtocolNotImplemented:
    return ProtocolNotImplemented(f"{what} coming soon. {GOOGLE_TV_MESSAGE}", hint=GOOGLE_TV_HINT)


class GoogleTVAdapter(ProtocolAdapter):
    """Every call reports ProtocolNotImplemented"""

    vendor = Vendor.GOOGLE_TV

    def __init__(self, config=None):
        self.config = config or {}

    async def keypress(self, ip: str, action: RemoteAction, token: Optional[str] = None):
        raise google_tv_not_implemented()

    async def key_down(self, ip, action, token=None):
        raise google_tv_not_implemented()

    async def key_up(self, ip, action, token=None):
        raise google_tv_not_implemented()

    async def launch(self, ip, app_id):
        raise google_tv_not_implemented()

    async def search(self, ip, keyword):
        raise google_tv_not_implemented()

    async def input_text(self, ip, text):
        raise google_tv_not_implemented()

    async def list_apps(self, ip):
        raise google_tv_not_implemented()

    async def app_icon(self, ip, app_id):
        raise google_tv_not_implemented()

    async def device_info(self, ip):
        raise google_tv_not_implemented()

    async def probe(self, ip):
        raise google_tv_not_implemented()
