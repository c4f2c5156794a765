from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config import Settings
from tooling import ToolManager
from upstream_fakes import MONZO_BASE, OPENAI_BASE, FakeUpstreams


@pytest.fixture()
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture()
def http_client(upstreams: FakeUpstreams):
    client = httpx.Client(transport=httpx.MockTransport(upstreams.handler))
    yield client
    client.close()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        monzo_token="monzo-token",
        monzo_user_id="user_default",
        openai_api_key="sk-test",
        monzo_base_url=MONZO_BASE,
        openai_base_url=OPENAI_BASE,
    )


@pytest.fixture()
def tool_manager(settings: Settings, http_client: httpx.Client) -> ToolManager:
    return ToolManager.from_settings(settings, http_client=http_client)


@pytest.fixture()
def client(settings: Settings, tool_manager: ToolManager):
    test_client = TestClient(create_app(settings, tool_manager))
    yield test_client
    test_client.close()
