import json
from typing import Any, Dict, List

import httpx
import pytest
from typer.testing import CliRunner

from megaverse.infrastructure.config.settings import clear_test_config, reset_configuration, set_config_for_testing

GOAL_MAP = [
    ["SPACE", "POLYANET", "SPACE"],
    ["RED_SOLOON", "SPACE", "UP_COMETH"],
    ["SPACE", "SPACE", "POLYANET"],
]


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeMegaverseApi:
    """In-memory megaverse API served through httpx.MockTransport."""

    def __init__(self, goal: Any = None):
        self.goal = GOAL_MAP if goal is None else goal
        self.requests: List[Dict[str, Any]] = []
        # Per (method, path) queue of (status, body) overrides consumed before the default answer
        self.scripted: Dict[tuple, List[tuple]] = {}

    def script(self, method: str, path: str, *responses: tuple) -> None:
        self.scripted.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append({"method": request.method, "path": path, "body": body})

        queue = self.scripted.get((request.method, path))
        if queue:
            status, text = queue.pop(0)
            return httpx.Response(status, text=text)
        if request.method == "GET" and path.endswith("/goal"):
            return httpx.Response(200, json={"goal": self.goal})
        return httpx.Response(200, json={})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str) -> List[Dict[str, Any]]:
        return [r for r in self.requests if r["method"] == method]


@pytest.fixture
def goal_map():
    return [list(row) for row in GOAL_MAP]


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fake_api():
    return FakeMegaverseApi()


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps tests away from the user's real config, .env and CANDIDATE_ID."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CANDIDATE_ID", raising=False)
    monkeypatch.setattr("megaverse.infrastructure.config.settings.DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    reset_configuration()
    yield
    clear_test_config()
    reset_configuration()


@pytest.fixture
def fast_config():
    """Configuration with a candidate id and no real waiting."""
    set_config_for_testing({
        "candidate_id": "test-candidate",
        "batch.cooldown_seconds": 0.0,
        "retry.base_delay_seconds": 0.0,
    })
