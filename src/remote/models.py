"""
Remote control data structures and models
"""

import ipaddress
from enum import Enum
from typing import Dict, Optional, Any
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone

from .errors import InvalidTarget


class Vendor(Enum):
    """Supported TV vendor protocols"""
    ROKU = "roku"
    SAMSUNG = "samsung"
    GOOGLE_TV = "google"


class RemoteAction(Enum):
    """Vendor-agnostic remote control actions"""
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"
    SELECT = "Select"
    BACK = "Back"
    HOME = "Home"
    PLAY = "Play"
    REV = "Rev"
    FWD = "Fwd"
    VOLUME_UP = "VolumeUp"
    VOLUME_DOWN = "VolumeDown"
    VOLUME_MUTE = "VolumeMute"
    POWER = "Power"
    INFO = "Info"
    SEARCH = "Search"
    INSTANT_REPLAY = "InstantReplay"


class ConnectionState(Enum):
    """Dispatcher session states"""
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def parse_vendor(value) -> Vendor:
    """Resolve a vendor name ("roku", "samsung", "google") to a Vendor"""
    if isinstance(value, Vendor):
        return value
    try:
        return Vendor(str(value).strip().lower())
    except ValueError:
        raise InvalidTarget(f"Unknown TV platform: {value}")


def validate_ip(ip: Optional[str]) -> str:
    """Return the dotted-quad IPv4 address or raise InvalidTarget"""
    if not ip or not str(ip).strip():
        raise InvalidTarget("IP address required")
    try:
        return str(ipaddress.IPv4Address(str(ip).strip()))
    except ValueError:
        raise InvalidTarget(f"Invalid IP address: {ip}")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds')


@dataclass
class Device:
    """A TV known to the gateway, either saved or freshly discovered"""
    ip: str
    name: str = "Roku Device"
    model: str = "Unknown"
    vendor: Vendor = Vendor.ROKU
    serial: Optional[str] = None
    last_used: Optional[str] = None

    def touch(self) -> None:
        """Mark the device as used now"""
        self.last_used = _utc_now_iso()

    def to_dict(self) -> Dict[str, Any]:
        """JSON representation used by the registry file and the HTTP API"""
        data = {
            "ip": self.ip,
            "name": self.name,
            "model": self.model,
            "vendor": self.vendor.value,
            "lastUsed": self.last_used,
        }
        if self.serial is not None:
            data["serial"] = self.serial
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        vendor = data.get("vendor") or Vendor.ROKU.value
        return cls(
            ip=data["ip"],
            name=data.get("name") or "Roku Device",
            model=data.get("model") or "Unknown",
            vendor=parse_vendor(vendor),
            serial=data.get("serial"),
            last_used=data.get("lastUsed"),
        )


@dataclass
class Connection:
    """Ephemeral connection state for one client session"""
    vendor: Vendor
    ip: str
    connected: bool = False
    device: Optional[Device] = None
    token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor.value,
            "ip": self.ip,
            "connected": self.connected,
            "device": self.device.to_dict() if self.device else None,
        }


@dataclass
class InstalledApp:
    """An app/channel installed on a Roku device"""
    id: str
    name: str
    type: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CommandResult:
    """Best-effort outcome of a single adapter call"""
    success: bool
    status: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)
