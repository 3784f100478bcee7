# File: tests/test_oauth.py

from datetime import date
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from sqlalchemy import select

from gearshare.api.v1.routes_auth import OAUTH_STATE_COOKIE, get_google_oauth_client
from gearshare.core.exceptions import OAuthNotConfigured, OAuthProviderError
from gearshare.core.security import create_oauth_state, decode_session_token
from gearshare.main import app
from gearshare.models.user import User
from gearshare.services.oauth import GoogleOAuthClient, OAuthProfile


class FakeGoogleClient:
    provider = "google"

    def __init__(self, profile: OAuthProfile | None = None, error: Exception | None = None):
        self.profile = profile
        self.error = error
        self.codes: list[str] = []

    def authorize_url(self, state: str) -> str:
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}"

    async def fetch_profile(self, code: str) -> OAuthProfile:
        self.codes.append(code)
        if self.error:
            raise self.error
        return self.profile

    async def close(self) -> None:
        pass


GINA = OAuthProfile(
    provider="google",
    subject="google-sub-42",
    email="gina@example.com",
    name="Gina",
    picture="https://lh3.example/gina.png",
    email_verified=True,
)


@pytest.fixture
def use_google(client):
    def _use(fake: FakeGoogleClient) -> FakeGoogleClient:
        app.dependency_overrides[get_google_oauth_client] = lambda: fake
        return fake

    return _use


def _callback(client, code="auth-code", callback_url="/"):
    state = create_oauth_state("google", callback_url)
    client.cookies.set(OAUTH_STATE_COOKIE, state)
    return client.get(
        "/api/v1/auth/callback/google",
        params={"code": code, "state": state},
        follow_redirects=False,
    )


def test_signin_without_configuration_is_503(client):
    resp = client.get("/api/v1/auth/signin/google", follow_redirects=False)
    assert resp.status_code == 503
    assert resp.json()["code"] == "oauth_not_configured"


def test_signin_redirects_to_provider_with_state(client, use_google):
    use_google(FakeGoogleClient(GINA))

    resp = client.get(
        "/api/v1/auth/signin/google", params={"callback_url": "/lend"}, follow_redirects=False
    )
    assert resp.status_code == 307
    location = resp.headers["location"]
    assert location.startswith("https://accounts.google.com/")
    state = parse_qs(urlparse(location).query)["state"][0]
    assert resp.cookies.get(OAUTH_STATE_COOKIE) == state


def test_first_google_login_creates_oauth_only_user(client, db_session, use_google):
    fake = use_google(FakeGoogleClient(GINA))

    resp = _callback(client)
    assert resp.status_code == 307
    assert resp.headers["location"] == "http://localhost:3000/onboarding"
    assert fake.codes == ["auth-code"]

    claims = decode_session_token(resp.cookies.get("gearshare.session-token"))
    assert claims.email == "gina@example.com"
    assert claims.name == "Gina"
    assert claims.picture == "https://lh3.example/gina.png"
    assert not claims.is_profile_complete

    user = db_session.scalar(select(User).where(User.email == "gina@example.com"))
    assert user.password_hash is None
    assert user.email_verified is not None
    assert [(a.provider, a.provider_account_id) for a in user.accounts] == [("google", "google-sub-42")]


def test_repeat_google_login_reuses_user(client, db_session, use_google):
    use_google(FakeGoogleClient(GINA))
    first = decode_session_token(_callback(client).cookies.get("gearshare.session-token"))
    second = decode_session_token(_callback(client).cookies.get("gearshare.session-token"))
    assert first.sub == second.sub
    assert len(db_session.scalars(select(User)).all()) == 1


def test_google_login_with_complete_profile_goes_to_callback(client, db_session, use_google):
    use_google(FakeGoogleClient(GINA))
    _callback(client)
    client.cookies.clear()

    user = db_session.scalar(select(User).where(User.email == "gina@example.com"))
    user.birthday = date(1992, 3, 3)
    user.phone_number = "+15550001111"
    db_session.commit()

    resp = _callback(client, callback_url="/lend")
    assert resp.headers["location"] == "http://localhost:3000/lend"
    token = resp.cookies.get("gearshare.session-token")
    assert decode_session_token(token).is_profile_complete


def test_google_login_for_password_account_is_not_linked(client, signup_payload, use_google):
    client.post("/api/v1/auth/signup", json={**signup_payload, "email": "gina@example.com"})
    use_google(FakeGoogleClient(GINA))

    resp = _callback(client)
    assert resp.headers["location"] == "http://localhost:3000/login?error=OAuthAccountNotLinked"
    assert resp.cookies.get("gearshare.session-token") is None


def test_oauth_user_cannot_use_password_login(client, use_google):
    use_google(FakeGoogleClient(GINA))
    _callback(client)
    client.cookies.clear()

    resp = client.post("/api/v1/auth/login", json={"email": "gina@example.com", "password": "x"})
    assert resp.status_code == 401
    assert resp.json()["code"] == "unsupported_login_method"


def test_callback_with_mismatched_state_is_rejected(client, use_google):
    fake = use_google(FakeGoogleClient(GINA))
    state = create_oauth_state("google", "/")
    client.cookies.set(OAUTH_STATE_COOKIE, "something-else")

    resp = client.get(
        "/api/v1/auth/callback/google",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "http://localhost:3000/login?error=OAuthCallback"
    assert fake.codes == []


def test_callback_with_provider_error_param(client, use_google):
    use_google(FakeGoogleClient(GINA))
    resp = client.get(
        "/api/v1/auth/callback/google",
        params={"error": "access_denied"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "http://localhost:3000/login?error=OAuthCallback"


def test_callback_when_provider_fails(client, use_google):
    use_google(FakeGoogleClient(error=OAuthProviderError()))
    resp = _callback(client)
    assert resp.headers["location"] == "http://localhost:3000/login?error=OAuthCallback"


# -----------------------------
# GoogleOAuthClient
# -----------------------------

def _google_transport(userinfo: dict, token_status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            assert b"grant_type=authorization_code" in request.content
            return httpx.Response(token_status, json={"access_token": "google-access-token"})
        if request.url.host == "openidconnect.googleapis.com":
            assert request.headers["Authorization"] == "Bearer google-access-token"
            return httpx.Response(200, json=userinfo)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def _client(transport: httpx.MockTransport) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        "client-id",
        "client-secret",
        "http://localhost:8000/api/v1/auth/callback/google",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_client_requires_credentials():
    with pytest.raises(OAuthNotConfigured):
        GoogleOAuthClient(None, "secret", "http://localhost/cb")


def test_authorize_url_carries_client_and_state():
    client = _client(_google_transport({}))
    query = parse_qs(urlparse(client.authorize_url("st4te")).query)
    assert query["client_id"] == ["client-id"]
    assert query["state"] == ["st4te"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["openid email profile"]


@pytest.mark.asyncio
async def test_fetch_profile():
    client = _client(
        _google_transport(
            {"sub": "123", "email": "gina@example.com", "name": "Gina", "email_verified": True}
        )
    )
    profile = await client.fetch_profile("auth-code")
    await client.close()

    assert profile == OAuthProfile(
        provider="google",
        subject="123",
        email="gina@example.com",
        name="Gina",
        picture=None,
        email_verified=True,
    )


@pytest.mark.asyncio
async def test_fetch_profile_token_rejected():
    client = _client(_google_transport({}, token_status=400))
    with pytest.raises(OAuthProviderError):
        await client.fetch_profile("bad-code")
    await client.close()


@pytest.mark.asyncio
async def test_fetch_profile_without_email():
    client = _client(_google_transport({"sub": "123"}))
    with pytest.raises(OAuthProviderError):
        await client.fetch_profile("auth-code")
    await client.close()
