"""
Remote control module: data model, vendor key maps and protocol adapters
"""

from typing import Dict

from .base import ProtocolAdapter
from .errors import (
    RemoteControlError, InvalidTarget, UnsupportedAction, NotConnected,
    RemoteUnreachable, ProtocolNotImplemented,
)
from .google_tv import GoogleTVAdapter
from .keymaps import KEY_MAPS, parse_action, resolve_key, wire_token
from .models import (
    Vendor, RemoteAction, ConnectionState, Device, Connection, InstalledApp,
    CommandResult, parse_vendor, validate_ip,
)
from .roku import RokuAdapter
from .samsung import SamsungAdapter


def create_adapters(config: Dict) -> Dict[Vendor, ProtocolAdapter]:
    """Build one adapter per vendor from the loaded configuration"""
    request_timeout = config.get('network', {}).get('request_timeout', 5)
    roku_config = {'request_timeout': request_timeout, **config.get('roku', {})}
    samsung_config = {'request_timeout': request_timeout, **config.get('samsung', {})}
    return {
        Vendor.ROKU: RokuAdapter(roku_config),
        Vendor.SAMSUNG: SamsungAdapter(samsung_config),
        Vendor.GOOGLE_TV: GoogleTVAdapter(config.get('google_tv', {})),
    }


__all__ = [
    'ProtocolAdapter', 'RokuAdapter', 'SamsungAdapter', 'GoogleTVAdapter', 'create_adapters',
    'RemoteControlError', 'InvalidTarget', 'UnsupportedAction', 'NotConnected',
    'RemoteUnreachable', 'ProtocolNotImplemented',
    'KEY_MAPS', 'parse_action', 'resolve_key', 'wire_token',
    'Vendor', 'RemoteAction', 'ConnectionState', 'Device', 'Connection', 'InstalledApp',
    'CommandResult', 'parse_vendor', 'validate_ip',
]
