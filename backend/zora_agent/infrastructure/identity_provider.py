"""Identity Providers — OAuth login against Twitter/X, or a local mock.

Invariants:
    - Both providers expose the same two-step flow: authorization_url() then fetch_profile()
    - The mock never performs network IO; its authorization URL is the local callback
    - Every transport or protocol failure surfaces as IdentityProviderError

Design Decisions:
    - OAuth 2.0 authorization code + PKCE (S256) over a shared httpx.AsyncClient
    - Provider chosen once at startup from MOCK_TWITTER
      (build_identity_provider in services/container.py)
"""

import base64
import hashlib
import logging
import secrets
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlencode

import httpx

from zora_agent.core.errors import IdentityProviderError

logger = logging.getLogger(__name__)

TWITTER_AUTHORIZE_URL = "https://twitter.com/i/oauth2/authorize"
TWITTER_TOKEN_URL = "https://api.twitter.com/2/oauth2/token"
TWITTER_ME_URL = "https://api.twitter.com/2/users/me"
TWITTER_SCOPES = "tweet.read users.read"


@dataclass(frozen=True)
class IdentityProfile:
    """What the identity provider tells us about the person logging in."""
    id: str
    username: str
    display_name: str
    photos: list[str] = field(default_factory=list)

    @property
    def profile_image(self) -> str | None:
        return self.photos[0] if self.photos else None


def new_pkce_pair() -> tuple[str, str]:
    """Return (code_verifier, S256 code_challenge)."""
    verifier = secrets.token_urlsafe(64)
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return verifier, challenge


class IdentityProvider(Protocol):
    name: str

    def authorization_url(self, state: str, code_challenge: str) -> str: ...

    async def fetch_profile(self, code: str, code_verifier: str) -> IdentityProfile: ...


class MockIdentityProvider:
    """Development login: every callback resolves to the same test profile."""

    name = "mock"
    CODE = "mock-authorization-code"
    PROFILE = IdentityProfile(
        id="mock_twitter_id",
        username="testuser",
        display_name="Test User",
        photos=["https://via.placeholder.com/150"],
    )

    def __init__(self, callback_url: str = "/auth/twitter/callback"):
        self.callback_url = callback_url

    def authorization_url(self, state: str, code_challenge: str) -> str:
        return f"{self.callback_url}?{urlencode({'code': self.CODE, 'state': state})}"

    async def fetch_profile(self, code: str, code_verifier: str) -> IdentityProfile:
        if code != self.CODE:
            raise IdentityProviderError("unknown authorization code")
        return self.PROFILE


class TwitterIdentityProvider:
    """Twitter/X OAuth 2.0 with PKCE."""

    name = "twitter"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        http: httpx.AsyncClient,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self._http = http

    def authorization_url(self, state: str, code_challenge: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": TWITTER_SCOPES,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return f"{TWITTER_AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str, code_verifier: str) -> IdentityProfile:
        token = await self._exchange_code(code, code_verifier)
        try:
            res = await self._http.get(
                TWITTER_ME_URL,
                params={"user.fields": "profile_image_url"},
                headers={"Authorization": f"Bearer {token}"},
            )
            res.raise_for_status()
            data = res.json()["data"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Twitter profile lookup failed: {e}")
            raise IdentityProviderError("profile lookup failed") from e
        image = data.get("profile_image_url")
        return IdentityProfile(
            id=str(data["id"]),
            username=data["username"],
            display_name=data.get("name") or data["username"],
            photos=[image] if image else [],
        )

    async def _exchange_code(self, code: str, code_verifier: str) -> str:
        try:
            res = await self._http.post(
                TWITTER_TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.callback_url,
                    "code_verifier": code_verifier,
                    "client_id": self.client_id,
                },
                auth=(self.client_id, self.client_secret),
            )
            res.raise_for_status()
            return res.json()["access_token"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Twitter token exchange failed: {e}")
            raise IdentityProviderError("token exchange failed") from e
