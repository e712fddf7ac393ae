from __future__ import annotations

import main


class FakeServer:
    instances: list["FakeServer"] = []

    def __init__(self, config_path: str, config: dict | None = None) -> None:
        self.config_path = config_path
        self.config = config
        self.started = False
        FakeServer.instances.append(self)

    async def start(self) -> None:
        self.started = True


def test_config_path_resolution() -> None:
    assert main.resolve_config_path(["main.py", "custom.yaml"], {"CONFIG_FILE": "env.yaml"}) == "custom.yaml"
    assert main.resolve_config_path(["main.py"], {"CONFIG_FILE": "env.yaml"}) == "env.yaml"
    assert main.resolve_config_path(["main.py"], {}) == "config/config.yaml"


async def test_missing_config_exits_with_error(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(main, "RemoteServer", FakeServer)

    assert await main.run(str(tmp_path / "missing.yaml")) == 1
    assert "Cannot start TV Remote Gateway" in capsys.readouterr().err


async def test_logging_is_configured_before_the_server_starts(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "network: {}\n"
        f"registry:\n  file: {tmp_path / 'devices.json'}\n"
        "logging:\n  console_output: false\n  file: null\n"
    )
    configured = []
    FakeServer.instances.clear()
    monkeypatch.setattr(main, "setup_logging", lambda config: configured.append(config))
    monkeypatch.setattr(main, "RemoteServer", FakeServer)

    assert await main.run(str(path)) == 0

    server = FakeServer.instances[-1]
    assert server.started is True
    assert configured == [server.config]
    assert server.config["registry"]["file"] == str(tmp_path / "devices.json")
