"""
Vendor key maps: RemoteAction -> vendor wire token
"""

from typing import Dict

from .errors import UnsupportedAction
from .models import RemoteAction, Vendor

A = RemoteAction

ROKU_KEYS: Dict[RemoteAction, str] = {
    A.UP: "Up", A.DOWN: "Down", A.LEFT: "Left", A.RIGHT: "Right",
    A.SELECT: "Select", A.BACK: "Back", A.HOME: "Home",
    A.PLAY: "Play", A.REV: "Rev", A.FWD: "Fwd",
    A.VOLUME_UP: "VolumeUp", A.VOLUME_DOWN: "VolumeDown", A.VOLUME_MUTE: "VolumeMute",
    A.POWER: "Power", A.INFO: "Info", A.SEARCH: "Search", A.INSTANT_REPLAY: "InstantReplay",
}

SAMSUNG_KEYS: Dict[RemoteAction, str] = {
    A.UP: "KEY_UP", A.DOWN: "KEY_DOWN", A.LEFT: "KEY_LEFT", A.RIGHT: "KEY_RIGHT",
    A.SELECT: "KEY_ENTER", A.BACK: "KEY_RETURN", A.HOME: "KEY_HOME",
    A.PLAY: "KEY_PLAY", A.REV: "KEY_REWIND", A.FWD: "KEY_FF",
    A.VOLUME_UP: "KEY_VOLUP", A.VOLUME_DOWN: "KEY_VOLDOWN", A.VOLUME_MUTE: "KEY_MUTE",
    A.POWER: "KEY_POWER", A.INFO: "KEY_INFO", A.SEARCH: "KEY_SEARCH", A.INSTANT_REPLAY: "KEY_REWIND",
}

GOOGLE_TV_KEYS: Dict[RemoteAction, str] = {
    A.UP: "DPAD_UP", A.DOWN: "DPAD_DOWN", A.LEFT: "DPAD_LEFT", A.RIGHT: "DPAD_RIGHT",
    A.SELECT: "DPAD_CENTER", A.BACK: "BACK", A.HOME: "HOME",
    A.PLAY: "MEDIA_PLAY_PAUSE", A.REV: "MEDIA_REWIND", A.FWD: "MEDIA_FAST_FORWARD",
    A.VOLUME_UP: "VOLUME_UP", A.VOLUME_DOWN: "VOLUME_DOWN", A.VOLUME_MUTE: "VOLUME_MUTE",
    A.POWER: "POWER", A.INFO: "INFO", A.SEARCH: "SEARCH", A.INSTANT_REPLAY: "MEDIA_PREVIOUS",
}

KEY_MAPS: Dict[Vendor, Dict[RemoteAction, str]] = {
    Vendor.ROKU: ROKU_KEYS,
    Vendor.SAMSUNG: SAMSUNG_KEYS,
    Vendor.GOOGLE_TV: GOOGLE_TV_KEYS,
}


def parse_action(value) -> RemoteAction:
    """Resolve an action name ("Up", "VolumeMute", ...) to a RemoteAction"""
    if isinstance(value, RemoteAction):
        return value
    try:
        return RemoteAction(value)
    except ValueError:
        raise UnsupportedAction(f"Unknown remote action: {value}")


def wire_token(vendor: Vendor, action: RemoteAction, key_map: Dict[RemoteAction, str] = None) -> str:
    """Look up the wire token for an action or raise UnsupportedAction"""
    key_map = KEY_MAPS[vendor] if key_map is None else key_map
    token = key_map.get(action)
    if token is None:
        raise UnsupportedAction(f"{action.value} is not supported on {vendor.value}")
    return token


def resolve_key(vendor: Vendor, key: str) -> RemoteAction:
    """
    Accept either an action name ("Up") or the vendor's own wire token
    ("KEY_UP" for Samsung) and return the RemoteAction
    """
    try:
        return RemoteAction(key)
    except ValueError:
        pass
    for action, token in KEY_MAPS[vendor].items():
        if token == key:
            return action
    raise UnsupportedAction(f"{key} is not a supported {vendor.value} key")
