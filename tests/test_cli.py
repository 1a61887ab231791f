from click.testing import CliRunner

from jokes_mcp import JokesMCP
from jokes_mcp.cli import main


def test_cli_passes_options_to_settings(monkeypatch):
    started: list[JokesMCP] = []
    monkeypatch.setattr(JokesMCP, "run", lambda self: started.append(self))

    result = CliRunner().invoke(main, ["--port", "4242", "--host", "127.0.0.1", "--log-level", "debug"])

    assert result.exit_code == 0, result.output
    [server] = started
    assert server.settings.port == 4242
    assert server.settings.host == "127.0.0.1"
    assert server.settings.log_level == "DEBUG"


def test_cli_defaults_to_environment(monkeypatch):
    started: list[JokesMCP] = []
    monkeypatch.setattr(JokesMCP, "run", lambda self: started.append(self))
    monkeypatch.setenv("PORT", "5000")

    result = CliRunner().invoke(main, [])

    assert result.exit_code == 0, result.output
    assert started[0].settings.port == 5000
