import asyncio

import httpx
import pytest

from musicvenn.auth import (
    SpotifyAuth,
    TokenStore,
    build_authorize_url,
    generate_code_challenge,
    generate_code_verifier,
)
from musicvenn.errors import ProviderError, ReauthenticationRequired

TOKEN_URL = "https://accounts.example/api/token"


class Clock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TokenEndpoint:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.forms = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.forms.append(dict(httpx.QueryParams(request.content.decode())))
        status, body = self.responses.pop(0)
        return httpx.Response(status, json=body)


def make_auth(endpoint, clock=None, store=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(endpoint))
    return SpotifyAuth(
        "client-123",
        "http://localhost:5173/callback",
        store=store,
        client=client,
        clock=clock or Clock(),
        token_url=TOKEN_URL,
    )


def test_code_challenge_matches_rfc7636_example():
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
    assert generate_code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


def test_code_verifier_shape():
    verifier = generate_code_verifier(128)
    assert len(verifier) == 128
    assert verifier.isalnum()
    assert verifier != generate_code_verifier(128)


def test_authorize_url_params():
    url = httpx.URL(build_authorize_url("client-123", "http://localhost:5173/callback", "chal"))
    params = url.params
    assert url.host == "accounts.spotify.com"
    assert params["client_id"] == "client-123"
    assert params["response_type"] == "code"
    assert params["redirect_uri"] == "http://localhost:5173/callback"
    assert params["code_challenge_method"] == "S256"
    assert params["code_challenge"] == "chal"
    assert "user-top-read" in params["scope"].split()


def test_begin_authorization_stores_verifier():
    auth = make_auth(TokenEndpoint())
    url = httpx.URL(auth.begin_authorization())
    assert url.params["code_challenge"] == generate_code_challenge(auth.store.verifier)


def test_exchange_then_fresh_token_is_reused():
    endpoint = TokenEndpoint((200, {"access_token": "A1", "refresh_token": "R1", "expires_in": 3600}))
    clock = Clock()
    auth = make_auth(endpoint, clock)
    auth.begin_authorization()
    verifier = auth.store.verifier

    async def scenario():
        token = await auth.exchange_code("the-code")
        clock.now += 100
        return token, await auth.get_valid_access_token()

    assert asyncio.run(scenario()) == ("A1", "A1")
    assert len(endpoint.forms) == 1
    form = endpoint.forms[0]
    assert form["grant_type"] == "authorization_code"
    assert form["code"] == "the-code"
    assert form["code_verifier"] == verifier
    assert auth.store.expires_at == 1000.0 + 3600


def test_expired_token_is_refreshed_and_refresh_token_kept():
    endpoint = TokenEndpoint((200, {"access_token": "A2", "expires_in": 60}))
    clock = Clock(5000.0)
    store = TokenStore(access_token="A1", refresh_token="R1", expires_at=4000.0)
    auth = make_auth(endpoint, clock, store)

    assert asyncio.run(auth.get_valid_access_token()) == "A2"
    assert endpoint.forms[0]["grant_type"] == "refresh_token"
    assert endpoint.forms[0]["refresh_token"] == "R1"
    assert store.refresh_token == "R1"
    assert store.expires_at == 5060.0


def test_no_credentials_requires_reauthentication():
    auth = make_auth(TokenEndpoint())
    with pytest.raises(ReauthenticationRequired) as info:
        asyncio.run(auth.get_valid_access_token())
    assert info.value.verifier == auth.store.verifier
    assert "code_challenge=" in info.value.authorize_url


def test_exchange_without_verifier_requires_reauthentication():
    auth = make_auth(TokenEndpoint())
    with pytest.raises(ReauthenticationRequired):
        asyncio.run(auth.exchange_code("code"))


def test_token_error_payload():
    endpoint = TokenEndpoint((400, {"error": "invalid_grant", "error_description": "Invalid authorization code"}))
    auth = make_auth(endpoint)
    auth.begin_authorization()
    with pytest.raises(ProviderError) as info:
        asyncio.run(auth.exchange_code("bad"))
    assert info.value.status == "invalid_grant"
    assert str(info.value) == "Invalid authorization code"


def test_missing_client_id():
    auth = SpotifyAuth(None, client=httpx.AsyncClient(transport=httpx.MockTransport(TokenEndpoint())))
    with pytest.raises(ProviderError):
        auth.begin_authorization()
