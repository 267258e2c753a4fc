"""Identity Providers — verifies the mock flow and the Twitter OAuth exchange.

Tests:
    - PKCE challenge is the S256 of the verifier
    - Mock authorization URL is the local callback carrying code + state
    - Twitter provider exchanges the code then reads the profile (httpx.MockTransport)
    - Twitter transport failure → IdentityProviderError
"""

import base64
import hashlib
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from zora_agent.core.errors import IdentityProviderError
from zora_agent.infrastructure.identity_provider import (
    MockIdentityProvider, TwitterIdentityProvider, new_pkce_pair,
)


def test_pkce_pair_uses_s256():
    verifier, challenge = new_pkce_pair()
    digest = hashlib.sha256(verifier.encode()).digest()
    assert challenge == base64.urlsafe_b64encode(digest).rstrip(b"=").decode()


async def test_mock_flow_round_trip():
    provider = MockIdentityProvider()
    url = urlparse(provider.authorization_url("st4te", "challenge"))
    query = parse_qs(url.query)
    assert url.path == "/auth/twitter/callback"
    assert query["state"] == ["st4te"]
    profile = await provider.fetch_profile(query["code"][0], "verifier")
    assert profile.username == "testuser"
    assert profile.profile_image


async def test_mock_rejects_unknown_code():
    with pytest.raises(IdentityProviderError):
        await MockIdentityProvider().fetch_profile("wrong", "verifier")


async def test_twitter_exchange_and_profile():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path.endswith("/oauth2/token"):
            assert b"code_verifier=v3rifier" in request.content
            return httpx.Response(200, json={"access_token": "tok"})
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"data": {
            "id": "42", "username": "artist", "name": "The Artist",
            "profile_image_url": "https://img/1.png",
        }})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        provider = TwitterIdentityProvider("cid", "secret", "http://cb", http)
        profile = await provider.fetch_profile("code", "v3rifier")

    assert seen == ["/2/oauth2/token", "/2/users/me"]
    assert profile.id == "42"
    assert profile.display_name == "The Artist"
    assert profile.profile_image == "https://img/1.png"


async def test_twitter_token_failure():
    transport = httpx.MockTransport(lambda request: httpx.Response(401))
    async with httpx.AsyncClient(transport=transport) as http:
        provider = TwitterIdentityProvider("cid", "secret", "http://cb", http)
        with pytest.raises(IdentityProviderError):
            await provider.fetch_profile("code", "verifier")


def test_twitter_authorization_url_has_pkce_params():
    provider = TwitterIdentityProvider("cid", "secret", "http://cb", http=None)
    query = parse_qs(urlparse(provider.authorization_url("s", "c")).query)
    assert query["code_challenge_method"] == ["S256"]
    assert query["client_id"] == ["cid"]
    assert query["redirect_uri"] == ["http://cb"]
