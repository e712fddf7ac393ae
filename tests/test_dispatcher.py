from __future__ import annotations

import asyncio

import pytest

from registry.manager import DeviceRegistry
from remote.base import ProtocolAdapter
from remote.errors import (
    InvalidTarget,
    NotConnected,
    ProtocolNotImplemented,
    RemoteUnreachable,
    UnsupportedAction,
)
from remote.google_tv import GoogleTVAdapter
from remote.models import CommandResult, ConnectionState, Device, InstalledApp, RemoteAction, Vendor
from services.dispatcher import CommandDispatcher, SessionStore


class FakeAdapter(ProtocolAdapter):
    def __init__(self, vendor: Vendor, reachable: bool = True, delay: float = 0.0) -> None:
        self.vendor = vendor
        self.reachable = reachable
        self.delay = delay
        self.calls: list[tuple] = []

    async def probe(self, ip: str) -> Device:
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.reachable:
            raise RemoteUnreachable(f"Failed to reach {ip}")
        return Device(ip=ip, name="Probed TV", model="Model X", vendor=self.vendor)

    async def keypress(self, ip, action, token=None) -> CommandResult:
        self.calls.append(("keypress", ip, self.token_for(action), token))
        return CommandResult(success=True)

    async def launch(self, ip, app_id) -> CommandResult:
        self.calls.append(("launch", ip, app_id))
        return CommandResult(success=True)

    async def list_apps(self, ip):
        return [InstalledApp(id="12", name="Netflix"), InstalledApp(id="837", name="YouTube")]


@pytest.fixture
def adapters() -> dict:
    return {
        Vendor.ROKU: FakeAdapter(Vendor.ROKU),
        Vendor.SAMSUNG: FakeAdapter(Vendor.SAMSUNG),
        Vendor.GOOGLE_TV: GoogleTVAdapter(),
    }


@pytest.fixture
def registry(config) -> DeviceRegistry:
    return DeviceRegistry(config)


@pytest.fixture
def dispatcher(adapters, registry) -> CommandDispatcher:
    return CommandDispatcher(adapters, registry, connect_timeout=0.5)


@pytest.mark.parametrize("vendor", [Vendor.ROKU, Vendor.SAMSUNG])
@pytest.mark.parametrize("action", list(RemoteAction))
async def test_each_action_is_one_wire_call(dispatcher, adapters, vendor, action) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.5", vendor.value)

    await dispatcher.send_action(session, action.value)

    assert len(adapters[vendor].calls) == 1
    name, ip, token, _ = adapters[vendor].calls[0]
    assert (name, ip) == ("keypress", "10.0.0.5")
    assert token == adapters[vendor].key_map[action]


async def test_action_missing_from_map_issues_no_call(dispatcher, adapters) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.5", "roku")

    with pytest.raises(UnsupportedAction):
        await dispatcher.send_action(session, "Teleport")

    assert adapters[Vendor.ROKU].calls == []


async def test_actions_require_connection(dispatcher) -> None:
    session = SessionStore().create()

    with pytest.raises(NotConnected):
        await dispatcher.send_action(session, "Up")
    with pytest.raises(NotConnected):
        await dispatcher.input_text(session, "hello")


async def test_connect_saves_device_and_disconnect_is_local(dispatcher, registry) -> None:
    session = SessionStore().create()

    connection = await dispatcher.connect(session, "10.0.0.5", "roku")

    assert session.state is ConnectionState.CONNECTED
    assert connection.connected is True
    saved = await registry.list_devices()
    assert [(d.ip, d.name) for d in saved] == [("10.0.0.5", "Probed TV")]

    dispatcher.disconnect(session)

    assert session.state is ConnectionState.IDLE
    assert session.connection is None
    assert len(await registry.list_devices()) == 1


async def test_reconnect_does_not_duplicate_registry_entry(dispatcher, registry) -> None:
    session = SessionStore().create()

    await dispatcher.connect(session, "10.0.0.5", "roku")
    dispatcher.disconnect(session)
    await dispatcher.connect(session, "10.0.0.5", "roku")

    assert session.connected
    assert len(await registry.list_devices()) == 1


async def test_reconnect_keeps_user_chosen_name(dispatcher, registry) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.5", "roku")
    await registry.rename("10.0.0.5", "Kids Room")

    connection = await dispatcher.connect(session, "10.0.0.5", "roku")

    assert connection.device.name == "Kids Room"
    assert (await registry.get("10.0.0.5")).name == "Kids Room"


async def test_unreachable_connect_returns_to_idle(adapters, registry) -> None:
    adapters[Vendor.ROKU] = FakeAdapter(Vendor.ROKU, reachable=False)
    dispatcher = CommandDispatcher(adapters, registry)
    session = SessionStore().create()

    with pytest.raises(RemoteUnreachable):
        await dispatcher.connect(session, "10.0.0.77", "roku")

    assert session.state is ConnectionState.IDLE
    assert session.connection is None
    assert await registry.list_devices() == []


async def test_connect_timeout_returns_to_idle(adapters, registry) -> None:
    adapters[Vendor.ROKU] = FakeAdapter(Vendor.ROKU, delay=1.0)
    dispatcher = CommandDispatcher(adapters, registry, connect_timeout=0.1)
    session = SessionStore().create()

    with pytest.raises(RemoteUnreachable):
        await dispatcher.connect(session, "10.0.0.77", "roku")

    assert session.state is ConnectionState.IDLE


async def test_invalid_ip_never_leaves_idle(dispatcher, adapters) -> None:
    session = SessionStore().create()

    with pytest.raises(InvalidTarget):
        await dispatcher.connect(session, "10.0.0", "roku")

    assert session.state is ConnectionState.IDLE


async def test_google_tv_connect_is_not_implemented(dispatcher) -> None:
    session = SessionStore().create()

    with pytest.raises(ProtocolNotImplemented):
        await dispatcher.connect(session, "10.0.0.5", "google")

    assert session.state is ConnectionState.IDLE


async def test_sessions_are_independent(dispatcher, adapters) -> None:
    store = SessionStore()
    living_room = store.get_or_create("phone-a")
    bedroom = store.get_or_create("phone-b")

    await dispatcher.connect(living_room, "10.0.0.5", "roku")
    await dispatcher.connect(bedroom, "10.0.0.6", "samsung")
    await dispatcher.send_action(living_room, "Home")
    await dispatcher.send_action(bedroom, "Home")

    assert adapters[Vendor.ROKU].calls[0][:3] == ("keypress", "10.0.0.5", "Home")
    assert adapters[Vendor.SAMSUNG].calls[0][:3] == ("keypress", "10.0.0.6", "KEY_HOME")
    assert len(store) == 2


async def test_samsung_token_is_forwarded(dispatcher, adapters) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.6", "samsung", token="abc123")

    await dispatcher.send_action(session, "Power")

    assert adapters[Vendor.SAMSUNG].calls[0][3] == "abc123"


async def test_launch_app_by_name(dispatcher, adapters) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.5", "roku")

    app = await dispatcher.launch_app_by_name(session, "youtube")

    assert app.id == "837"
    assert adapters[Vendor.ROKU].calls == [("launch", "10.0.0.5", "837")]
    with pytest.raises(InvalidTarget):
        await dispatcher.launch_app_by_name(session, "Spotify")


async def test_unsupported_capability_on_samsung(dispatcher) -> None:
    session = SessionStore().create()
    await dispatcher.connect(session, "10.0.0.6", "samsung")

    with pytest.raises(UnsupportedAction):
        await dispatcher.search(session, "news")
