import asyncio
import logging
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from megaverse import main
from megaverse.infrastructure.cli.display import ConsoleDisplay
from megaverse.infrastructure.config.settings import set_config_for_testing
from megaverse.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# fake_api: FakeMegaverseApi served through httpx.MockTransport
# fast_config: candidate id set, no cooldown or backoff waiting

RATE_LIMITED = (429, '{"error":true,"reason":"Too Many Requests. Try again later."}')


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers with ones bound to the runner's streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('megaverse.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture
def wired_to_fake_api(mocker, fake_api):
    """Routes every HTTP call of the composition root to the fake API."""
    real_create_dependencies = main.create_dependencies
    mocker.patch(
        'megaverse.main.create_dependencies',
        side_effect=lambda: real_create_dependencies(transport=fake_api.transport),
    )
    return fake_api


def test_default_invocation_creates_megaverse(
    runner: CliRunner, fast_config, wired_to_fake_api, mock_console_display: MagicMock
):
    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.stdout
    posts = wired_to_fake_api.calls("POST")
    assert sorted(call["path"] for call in posts) == [
        "/api/comeths", "/api/polyanets", "/api/polyanets", "/api/soloons",
    ]
    assert all(call["body"]["candidateId"] == "test-candidate" for call in posts)
    assert wired_to_fake_api.calls("GET")[0]["path"] == "/api/map/test-candidate/goal"
    mock_console_display.display_info.assert_called_once_with("Megaverse created.")
    mock_console_display.display_error.assert_not_called()


def test_create_survives_failing_objects(
    runner: CliRunner, fast_config, wired_to_fake_api, mock_console_display: MagicMock
):
    wired_to_fake_api.script("POST", "/api/soloons", (500, "Internal error"))
    wired_to_fake_api.script("POST", "/api/comeths", RATE_LIMITED, RATE_LIMITED, RATE_LIMITED)

    result = runner.invoke(app, ["create"])

    assert result.exit_code == 0, result.stdout
    paths = [call["path"] for call in wired_to_fake_api.calls("POST")]
    assert paths.count("/api/soloons") == 1
    assert paths.count("/api/comeths") == 3
    assert paths.count("/api/polyanets") == 2
    mock_console_display.display_info.assert_called_once_with("Megaverse created.")


def test_goal_map_failure_is_reported_without_placing(
    runner: CliRunner, fast_config, wired_to_fake_api, mock_console_display: MagicMock
):
    wired_to_fake_api.script("GET", "/api/map/test-candidate/goal", (503, "Service unavailable"))

    result = runner.invoke(app, ["create"])

    assert result.exit_code == 0
    assert wired_to_fake_api.calls("POST") == []
    mock_console_display.display_error.assert_called_once()
    assert "Service unavailable" in mock_console_display.display_error.call_args.args[0]


def test_clear_deletes_goal_objects(
    runner: CliRunner, fast_config, wired_to_fake_api, mock_console_display: MagicMock
):
    result = runner.invoke(app, ["clear"])

    assert result.exit_code == 0, result.stdout
    assert len(wired_to_fake_api.calls("DELETE")) == 4
    assert wired_to_fake_api.calls("POST") == []
    mock_console_display.display_info.assert_called_once_with("Megaverse cleared.")


def test_show_goal_renders_map(
    runner: CliRunner, fast_config, wired_to_fake_api, mock_console_display: MagicMock
):
    result = runner.invoke(app, ["show-goal"])

    assert result.exit_code == 0, result.stdout
    mock_console_display.display_goal_map.assert_called_once_with(wired_to_fake_api.goal)
    assert wired_to_fake_api.calls("POST") == []


def test_missing_candidate_id_exits_with_error(
    runner: CliRunner, wired_to_fake_api, mock_console_display: MagicMock
):
    result = runner.invoke(app, ["create"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()
    assert wired_to_fake_api.requests == []


def test_composition_root_applies_configured_api_settings(fast_config, fake_api, mock_console_display: MagicMock):
    set_config_for_testing({"api.base_url": "http://localhost:8080/api/", "api.timeout_seconds": 2.5})

    dependencies = main.create_dependencies(transport=fake_api.transport)

    http = dependencies['http_client']
    assert http.base_url == "http://localhost:8080/api"
    assert http._client.timeout.read == 2.5
    asyncio.run(http.aclose())
