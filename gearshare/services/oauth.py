# File: gearshare/services/oauth.py

"""
Google OAuth 2.0 authorization-code flow.

Builds the authorize redirect, exchanges the returned code for a token and
fetches the user's profile from the userinfo endpoint.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from gearshare.core.config import Settings, settings
from gearshare.core.exceptions import OAuthNotConfigured, OAuthProviderError

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


@dataclass(frozen=True)
class OAuthProfile:
    provider: str
    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False


class GoogleOAuthClient:
    """
    Thin client for Google's OAuth endpoints.

    Attributes:
        client_id: OAuth client id
        client_secret: OAuth client secret
        redirect_uri: Callback URL registered with Google
    """

    provider = "google"

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not client_id or not client_secret:
            raise OAuthNotConfigured()
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, connect=5.0)
        )

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "GoogleOAuthClient":
        redirect_uri = f"{config.public_base_url}{config.api_v1_prefix}/auth/callback/google"
        return cls(config.google_client_id, config.google_client_secret, redirect_uri)

    def authorize_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> OAuthProfile:
        """
        Exchange an authorization code and return the signed-in user's profile.

        Raises:
            OAuthProviderError: Google refused the code or returned no usable identity
        """
        try:
            token_response = await self._http_client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
            token_response.raise_for_status()
            access_token = token_response.json().get("access_token")
            if not access_token:
                raise OAuthProviderError("Token response contained no access token.")

            userinfo_response = await self._http_client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            userinfo_response.raise_for_status()
            userinfo = userinfo_response.json()
        except httpx.HTTPError as e:
            logger.error("Google OAuth exchange failed: %s", e, exc_info=True)
            raise OAuthProviderError() from e

        subject = userinfo.get("sub")
        email = userinfo.get("email")
        if not subject or not email:
            logger.warning("Google userinfo missing sub/email: keys=%s", sorted(userinfo))
            raise OAuthProviderError("The sign-in provider did not return an email address.")

        return OAuthProfile(
            provider=self.provider,
            subject=str(subject),
            email=email,
            name=userinfo.get("name"),
            picture=userinfo.get("picture"),
            email_verified=bool(userinfo.get("email_verified")),
        )

    async def close(self) -> None:
        await self._http_client.aclose()
