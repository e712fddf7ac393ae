"""
Command Dispatcher - per-session connection state and action routing

Each client session owns one SessionContext. Routing is a pure lookup of
the connected vendor's adapter; the dispatcher itself speaks no protocol.
"""

import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from remote.base import ProtocolAdapter
from remote.errors import (
    InvalidTarget, NotConnected, RemoteControlError, RemoteUnreachable,
)
from remote.keymaps import parse_action
from remote.models import (
    CommandResult, Connection, ConnectionState, Device, InstalledApp,
    Vendor, parse_vendor, validate_ip,
)

logger = logging.getLogger(__name__)


class SessionContext:
    """Connection state for one client session: Idle -> Connecting -> Connected -> Idle"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.state = ConnectionState.IDLE
        self.connection: Optional[Connection] = None

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED and self.connection is not None

    def reset(self) -> None:
        self.state = ConnectionState.IDLE
        self.connection = None

    def to_dict(self) -> Dict:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "connection": self.connection.to_dict() if self.connection else None,
        }


class SessionStore:
    """Independent SessionContexts keyed by client session id"""

    def __init__(self):
        self._sessions: Dict[str, SessionContext] = {}

    def create(self) -> SessionContext:
        return self.get_or_create(uuid.uuid4().hex)

    def get_or_create(self, session_id: str) -> SessionContext:
        session = self._sessions.get(session_id)
        if session is None:
            session = SessionContext(session_id)
            self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[SessionContext]:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


class CommandDispatcher:
    """Routes abstract commands for a session to the connected vendor's adapter"""

    def __init__(self, adapters: Dict[Vendor, ProtocolAdapter], registry=None, connect_timeout: float = 5):
        self.adapters = adapters
        self.registry = registry
        self.connect_timeout = connect_timeout

    def adapter_for(self, vendor: Vendor) -> ProtocolAdapter:
        return self.adapters[vendor]

    def _require_connection(self, session: SessionContext) -> Connection:
        if not session.connected:
            raise NotConnected("Not connected to a TV", hint="Connect to a TV first")
        return session.connection

    # ================== CONNECTION LIFECYCLE ==================

    async def connect(self, session: SessionContext, ip: str, vendor="roku",
                      token: Optional[str] = None) -> Connection:
        """
        Probe the TV and, on success, mark the session connected and save the device
        Any failure leaves the session Idle with no partial connection
        """
        ip = validate_ip(ip)
        vendor = parse_vendor(vendor)
        adapter = self.adapter_for(vendor)
        
        session.reset()
        session.state = ConnectionState.CONNECTING
        logger.info(f"Session {session.session_id}: connecting to {vendor.value} at {ip}")
        
        try:
            device = await asyncio.wait_for(adapter.probe(ip), self.connect_timeout)
        except asyncio.TimeoutError as e:
            session.reset()
            raise RemoteUnreachable(f"Timed out connecting to {ip}",
                                    hint="Check the IP address and that the TV is on") from e
        except RemoteControlError:
            session.reset()
            raise
        except asyncio.CancelledError:
            session.reset()
            raise
        
        device = await self._remember(device)
        session.connection = Connection(vendor=vendor, ip=ip, connected=True, device=device, token=token)
        session.state = ConnectionState.CONNECTED
        logger.info(f"Session {session.session_id}: connected to {device.name} ({ip})")
        return session.connection

    async def _remember(self, device: Device) -> Device:
        """Upsert the probed device, keeping a name the user already chose"""
        if not self.registry:
            device.touch()
            return device
        existing = await self.registry.get(device.ip)
        if existing and existing.name:
            device.name = existing.name
        try:
            return await self.registry.upsert(device)
        except OSError as e:
            logger.error(f"Could not save device {device.ip}: {e}")
            return device

    def disconnect(self, session: SessionContext) -> None:
        """Local-only transition back to Idle"""
        if session.connection:
            logger.info(f"Session {session.session_id}: disconnected from {session.connection.ip}")
        session.reset()

    # ================== COMMAND ROUTING ==================

    async def send_action(self, session: SessionContext, action) -> CommandResult:
        connection = self._require_connection(session)
        action = parse_action(action)
        adapter = self.adapter_for(connection.vendor)
        return await adapter.keypress(connection.ip, action, token=connection.token)

    async def key_down(self, session: SessionContext, action) -> CommandResult:
        connection = self._require_connection(session)
        adapter = self.adapter_for(connection.vendor)
        return await adapter.key_down(connection.ip, parse_action(action), token=connection.token)

    async def key_up(self, session: SessionContext, action) -> CommandResult:
        connection = self._require_connection(session)
        adapter = self.adapter_for(connection.vendor)
        return await adapter.key_up(connection.ip, parse_action(action), token=connection.token)

    async def launch(self, session: SessionContext, app_id: str) -> CommandResult:
        connection = self._require_connection(session)
        return await self.adapter_for(connection.vendor).launch(connection.ip, app_id)

    async def search(self, session: SessionContext, keyword: str) -> CommandResult:
        connection = self._require_connection(session)
        return await self.adapter_for(connection.vendor).search(connection.ip, keyword)

    async def input_text(self, session: SessionContext, text: str) -> CommandResult:
        connection = self._require_connection(session)
        return await self.adapter_for(connection.vendor).input_text(connection.ip, text)

    async def list_apps(self, session: SessionContext) -> List[InstalledApp]:
        connection = self._require_connection(session)
        return await self.adapter_for(connection.vendor).list_apps(connection.ip)

    async def launch_app_by_name(self, session: SessionContext, app_name: str) -> InstalledApp:
        """Launch the first installed app whose name contains app_name (case-insensitive)"""
        apps = await self.list_apps(session)
        wanted = app_name.lower()
        app = next((a for a in apps if wanted in a.name.lower()), None)
        if app is None:
            raise InvalidTarget(f'App "{app_name}" not found')
        await self.launch(session, app.id)
        return app
