# File: gearshare/api/v1/routes_auth.py

"""
Auth API routes.

  - signup / password checklist
  - email + password login (JSON, or HTML form with redirects)
  - session lookup and logout
  - Google sign-in (authorization-code flow)
"""

import logging
from collections.abc import AsyncGenerator
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from gearshare.api.deps import clear_session_cookie, get_db, get_optional_session, set_session_cookie
from gearshare.core.config import settings
from gearshare.core.exceptions import AuthenticationError, GearShareError, OAuthAccountNotLinked
from gearshare.core.security import create_oauth_state, create_session_token, decode_oauth_state
from gearshare.core.validators import password_requirements, safe_callback_url
from gearshare.schemas.session import SessionClaims, SessionResponse, TokenResponse
from gearshare.schemas.user import (
    LoginRequest,
    PasswordCheckRequest,
    PasswordRequirement,
    SignupRequest,
    SignupResponse,
    UserRead,
)
from gearshare.services import auth_service
from gearshare.services.oauth import GoogleOAuthClient

logger = logging.getLogger(__name__)

router = APIRouter()

OAUTH_STATE_COOKIE = "gearshare.oauth-state"


def login_page_url(error: str) -> str:
    return f"{settings.frontend_url}/login?{urlencode({'error': error})}"


def frontend_url(path: str) -> str:
    return f"{settings.frontend_url}{path}"


async def get_google_oauth_client() -> AsyncGenerator[GoogleOAuthClient, None]:
    client = GoogleOAuthClient.from_settings()
    try:
        yield client
    finally:
        await client.close()


# ----------------------------------------------------
# Signup
# ----------------------------------------------------
@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account with email and password",
)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    user = auth_service.signup_user(db, payload)
    return SignupResponse(user=UserRead.model_validate(user))


@router.post(
    "/password-requirements",
    response_model=list[PasswordRequirement],
    summary="Password strength checklist",
)
def check_password_requirements(payload: PasswordCheckRequest):
    return password_requirements(payload.password)


# ----------------------------------------------------
# Credentials login
# ----------------------------------------------------
@router.post("/login", response_model=TokenResponse, summary="Log in with email and password")
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(db, email=payload.email, password=payload.password)
    token, claims = create_session_token(user)
    set_session_cookie(response, token)
    return TokenResponse(
        access_token=token,
        expires_at=claims.expires_at,
        user=UserRead.model_validate(user),
    )


@router.post(
    "/callback/credentials",
    response_class=RedirectResponse,
    summary="Form login; redirects to the app or back to the login page",
)
def login_form(
    email: str = Form(...),
    password: str = Form(...),
    callback_url: Optional[str] = Form(default=None),
    db: Session = Depends(get_db),
):
    try:
        # Same normalisation as the JSON login
        credentials = LoginRequest(email=email.strip(), password=password)
        user = auth_service.authenticate_user(
            db, email=credentials.email, password=credentials.password
        )
    except (ValidationError, AuthenticationError):
        return RedirectResponse(
            login_page_url("CredentialsSignin"), status_code=status.HTTP_303_SEE_OTHER
        )

    token, _ = create_session_token(user)
    redirect = RedirectResponse(
        frontend_url(safe_callback_url(callback_url)), status_code=status.HTTP_303_SEE_OTHER
    )
    set_session_cookie(redirect, token)
    return redirect


# ----------------------------------------------------
# Session
# ----------------------------------------------------
@router.get("/session", response_model=Optional[SessionResponse], summary="Current session, or null")
def read_session(claims: Optional[SessionClaims] = Depends(get_optional_session)):
    if claims is None:
        return None
    return SessionResponse.from_claims(claims)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="End the session")
def logout():
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response)
    return response


# ----------------------------------------------------
# Google sign-in
# ----------------------------------------------------
@router.get("/signin/google", response_class=RedirectResponse, summary="Start Google sign-in")
def signin_google(
    callback_url: Optional[str] = Query(default=None),
    client: GoogleOAuthClient = Depends(get_google_oauth_client),
):
    state = create_oauth_state(client.provider, safe_callback_url(callback_url))
    redirect = RedirectResponse(client.authorize_url(state))
    redirect.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        max_age=settings.oauth_state_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    return redirect


@router.get("/callback/google", response_class=RedirectResponse, summary="Google sign-in callback")
async def callback_google(
    request: Request,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    client: GoogleOAuthClient = Depends(get_google_oauth_client),
    db: Session = Depends(get_db),
):
    if error or not code or not state:
        logger.warning("Google callback without a code (error=%s)", error)
        return _oauth_failure("OAuthCallback")

    payload = decode_oauth_state(state, client.provider)
    if payload is None or request.cookies.get(OAUTH_STATE_COOKIE) != state:
        logger.warning("Google callback with an invalid or mismatched state")
        return _oauth_failure("OAuthCallback")

    try:
        profile = await client.fetch_profile(code)
        user = auth_service.complete_oauth_login(db, profile)
    except OAuthAccountNotLinked:
        return _oauth_failure("OAuthAccountNotLinked")
    except GearShareError as e:
        logger.warning("Google sign-in failed: %s", e.message)
        return _oauth_failure("OAuthCallback")

    token, claims = create_session_token(user)
    destination = payload["callback_url"] if claims.is_profile_complete else "/onboarding"
    redirect = RedirectResponse(frontend_url(safe_callback_url(destination)))
    set_session_cookie(redirect, token)
    redirect.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    return redirect


def _oauth_failure(error: str) -> RedirectResponse:
    redirect = RedirectResponse(login_page_url(error))
    redirect.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    return redirect
