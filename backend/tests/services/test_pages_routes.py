"""Page + Health Routes — landing, pricing, login and probes.

Tests:
    - Landing, pricing and login pages render HTML
    - /login redirects a logged-in user to /analytics
    - Health liveness and readiness report the data directory
    - Unknown routes answer 404 in the standard error shape
"""


async def test_landing_page(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert "text/html" in res.headers["content-type"]


async def test_pricing_page_flags(client):
    res = await client.get("/pricing", params={"cancelled": "true"})
    assert res.status_code == 200
    assert "cancelled" in res.text.lower()


async def test_login_page_for_guest(client):
    res = await client.get("/login")
    assert res.status_code == 200
    assert "/auth/twitter" in res.text


async def test_login_page_redirects_when_logged_in(free_client):
    res = await free_client.get("/login")
    assert res.status_code == 303
    assert res.headers["location"] == "/analytics"


async def test_health(client):
    body = (await client.get("/health/")).json()
    assert body["status"] == "healthy"
    assert body["refreshJobRunning"] is False


async def test_readiness(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json()["status"] == "ready"
