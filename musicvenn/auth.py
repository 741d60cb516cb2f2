"""
Spotify authorization (authorization code flow with PKCE).

Tokens live in memory only. `get_valid_access_token()` hands out the stored
token while it is fresh, refreshes it when it has expired, and raises
ReauthenticationRequired (carrying the URL to visit) when neither works.
"""
import base64
import hashlib
import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from musicvenn.config import (
    DEFAULT_REDIRECT_URI,
    DEFAULT_TOKEN_LIFETIME,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_SCOPE,
    SPOTIFY_TOKEN_URL,
)
from musicvenn.errors import ProviderError, ReauthenticationRequired

logger = logging.getLogger(__name__)

_VERIFIER_ALPHABET = string.ascii_letters + string.digits


def generate_code_verifier(length: int = 128) -> str:
    return "".join(secrets.choice(_VERIFIER_ALPHABET) for _ in range(length))


def generate_code_challenge(verifier: str) -> str:
    """S256 challenge: url-safe base64 of SHA-256(verifier), no padding."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def build_authorize_url(client_id: str, redirect_uri: str, challenge: str, scope: str = SPOTIFY_SCOPE) -> str:
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": scope,
        "code_challenge_method": "S256",
        "code_challenge": challenge,
    }
    return str(httpx.URL(SPOTIFY_AUTHORIZE_URL, params=params))


@dataclass
class TokenStore:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: float = 0.0
    verifier: Optional[str] = None

    def is_fresh(self, now: float) -> bool:
        return bool(self.access_token) and now < self.expires_at


class SpotifyAuth:

    def __init__(
        self,
        client_id: Optional[str],
        redirect_uri: str = DEFAULT_REDIRECT_URI,
        store: Optional[TokenStore] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
        token_url: str = SPOTIFY_TOKEN_URL,
    ):
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.store = store or TokenStore()
        self.token_url = token_url
        self._clock = clock
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def begin_authorization(self) -> str:
        """Start a new PKCE round and return the URL the user must open."""
        if not self.client_id:
            raise ProviderError("missing client id", "Spotify client id is not configured (SPOTIFY_CLIENT_ID).")
        self.store.verifier = generate_code_verifier(128)
        return build_authorize_url(
            self.client_id, self.redirect_uri, generate_code_challenge(self.store.verifier)
        )

    async def exchange_code(self, code: str) -> str:
        """Trade the authorization code from the redirect for tokens."""
        if not self.store.verifier:
            raise ReauthenticationRequired(self.begin_authorization(), self.store.verifier)
        data = {
            "client_id": self.client_id,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "code_verifier": self.store.verifier,
        }
        payload = await self._token_request(data)
        self._remember(payload)
        logger.info("Obtained Spotify access token.")
        return self.store.access_token

    async def refresh(self) -> str:
        data = {
            "client_id": self.client_id,
            "grant_type": "refresh_token",
            "refresh_token": self.store.refresh_token,
        }
        payload = await self._token_request(data)
        self._remember(payload)
        logger.info("Refreshed Spotify access token.")
        return self.store.access_token

    async def get_valid_access_token(self) -> str:
        if self.store.is_fresh(self._clock()):
            return self.store.access_token
        if self.store.refresh_token:
            return await self.refresh()
        url = self.begin_authorization()
        raise ReauthenticationRequired(url, self.store.verifier)

    # -----------------------------------------------------------------------

    async def _token_request(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(self.token_url, data=data)
        except httpx.HTTPError as exc:
            raise ProviderError(type(exc).__name__, f"Token request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if isinstance(payload, dict) and payload.get("error"):
            logger.error("Spotify token endpoint returned an error: %s", payload)
            raise ProviderError(str(payload["error"]), payload.get("error_description"))
        if not response.is_success:
            raise ProviderError(response.reason_phrase or str(response.status_code))
        if not isinstance(payload, dict) or "access_token" not in payload:
            raise ProviderError("malformed response", "Token response has no access_token.")
        return payload

    def _remember(self, payload: Dict[str, Any]) -> None:
        self.store.access_token = payload["access_token"]
        # Spotify may omit a new refresh token on refresh; keep the old one then
        if payload.get("refresh_token"):
            self.store.refresh_token = payload["refresh_token"]
        lifetime = float(payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME)
        self.store.expires_at = self._clock() + lifetime
