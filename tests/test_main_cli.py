import asyncio

import httpx

import main
from main import _lookup_user, _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.port is None


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 8080


def test_lookup_user_subcommand() -> None:
    args = _parse_args(["lookup-user", "alex@example.com"])
    assert args.command == "lookup-user"
    assert args.email == "alex@example.com"


def test_lookup_user_prints_match(monkeypatch, settings, fake_panel, capsys) -> None:
    user_id = fake_panel.add_user("alex@example.com", "alex")
    original = main.PanelClient.from_settings

    def from_settings(cls_settings, **kwargs):
        return original(cls_settings, transport=fake_panel.transport())

    monkeypatch.setattr(main.PanelClient, "from_settings", from_settings)

    assert asyncio.run(_lookup_user(settings, "alex@example.com")) == 0
    assert capsys.readouterr().out.strip() == f"{user_id}\talex\talex@example.com"


def test_lookup_user_reports_failure(monkeypatch, settings, fake_panel, capsys) -> None:
    fake_panel.error = httpx.ConnectError("refused")
    original = main.PanelClient.from_settings

    def from_settings(cls_settings, **kwargs):
        return original(cls_settings, transport=fake_panel.transport())

    monkeypatch.setattr(main.PanelClient, "from_settings", from_settings)

    assert asyncio.run(_lookup_user(settings, "alex@example.com")) == 1
    assert "Could not connect to the panel" in capsys.readouterr().out
