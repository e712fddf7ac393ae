"""
Error taxonomy for remote control operations

Every vendor-call failure is converted into one of these at the adapter
boundary; raw transport exceptions never leave the adapters.
"""

from typing import Optional, Dict, Any


class RemoteControlError(Exception):
    """Base error for the remote gateway"""

    kind = "RemoteControlError"
    status_code = 500

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.kind, "message": self.message}
        if self.hint:
            body["hint"] = self.hint
        return body


class InvalidTarget(RemoteControlError):
    """Missing or malformed IP address (or unknown app/vendor); never retried"""

    kind = "InvalidTarget"
    status_code = 400


class UnsupportedAction(RemoteControlError):
    """Action has no wire token in the vendor's key map"""

    kind = "UnsupportedAction"
    status_code = 400


class NotConnected(RemoteControlError):
    """Session has no active connection"""

    kind = "NotConnected"
    status_code = 409


class RemoteUnreachable(RemoteControlError):
    """Network timeout, refused connection or unusable device response"""

    kind = "RemoteUnreachable"
    status_code = 502


class ProtocolNotImplemented(RemoteControlError):
    """Vendor protocol not supported in this version (Google TV)"""

    kind = "NotImplemented"
    status_code = 501
