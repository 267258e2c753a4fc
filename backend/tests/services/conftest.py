"""Service test fixtures — temp-dir container + FastAPI test client.

Invariants:
    - Every test gets a fresh data directory (tmp_path) seeded with the demo cards
    - The app under test gets its container placed on app.state directly
      (ASGITransport does not run the lifespan)
    - login(client, profile_id) logs a client in through the dev user switcher

Design Decisions:
    - Real JSON repositories over tmp_path instead of fakes: the file format is
      part of the behaviour under test
    - Rate limit raised high by default; rate-limit tests build their own app
"""

import random

import pytest
from httpx import ASGITransport, AsyncClient

from zora_agent.config import Settings
from zora_agent.main import create_app
from zora_agent.services.container import build_container

PRO_PROFILE = "pro_user_1"
FREE_PROFILE = "free_user_1"
TOKEN_GATE_PROFILE = "token_gate_user_1"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        environment="test",
        data_dir=tmp_path,
        mock_twitter=True,
        mock_stripe=True,
        mock_market_data=True,
        analytics_job_enabled=False,
        rate_limit_max_requests=10_000,
        log_format="text",
    )


@pytest.fixture
async def container(settings):
    c = build_container(settings, rng=random.Random(7))
    c.seed_demo_data()
    yield c
    await c.aclose()


@pytest.fixture
def app(settings, container):
    application = create_app(settings)
    application.state.container = container
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


async def _login(client: AsyncClient, profile_id: str) -> None:
    res = await client.post("/dev/switch-user", data={"userId": profile_id})
    assert res.status_code == 303, res.text


@pytest.fixture
def login():
    return _login


@pytest.fixture
async def pro_client(client):
    await _login(client, PRO_PROFILE)
    return client


@pytest.fixture
async def free_client(client):
    await _login(client, FREE_PROFILE)
    return client
