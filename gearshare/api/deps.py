# File: gearshare/api/deps.py

import logging
from collections.abc import Generator
from typing import Optional

from fastapi import Cookie, Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gearshare.core.config import settings
from gearshare.core.exceptions import NotAuthenticated, ProfileIncomplete
from gearshare.core.security import (
    create_session_token,
    decode_session_token,
    encode_session_claims,
    refresh_session_claims,
    should_refresh,
)
from gearshare.db.session import SessionLocal
from gearshare.models.user import User
from gearshare.schemas.session import SessionClaims

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ----------------------------------------------------
# Session cookie
# ----------------------------------------------------
def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")


# ----------------------------------------------------
# Session claims
# ----------------------------------------------------
def get_optional_session(
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session_cookie: Optional[str] = Cookie(default=None, alias=settings.session_cookie_name),
) -> Optional[SessionClaims]:
    """
    Decode the caller's session token if there is one.

    Bearer header wins over the cookie. A cookie token past its update age
    is re-signed with the same claims and sent back as a fresh cookie;
    bearer clients get a new token by logging in again.
    """
    from_cookie = credentials is None
    token = session_cookie if from_cookie else credentials.credentials
    if not token:
        return None

    try:
        claims = decode_session_token(token)
    except NotAuthenticated:
        return None

    if from_cookie and should_refresh(claims):
        claims = refresh_session_claims(claims)
        set_session_cookie(response, encode_session_claims(claims))
        logger.debug("Refreshed session for user %s", claims.sub)
    return claims


def require_session(
    claims: Optional[SessionClaims] = Depends(get_optional_session),
) -> SessionClaims:
    if claims is None:
        raise NotAuthenticated()
    return claims


def get_current_user(
    claims: SessionClaims = Depends(require_session),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, claims.sub)
    if user is None:
        # Token outlived its account
        logger.warning("Session for unknown user %s", claims.sub)
        raise NotAuthenticated()
    return user


def require_complete_profile(
    response: Response,
    claims: SessionClaims = Depends(require_session),
    user: User = Depends(get_current_user),
) -> User:
    """
    Gate for routes that need a birthday and phone number on file.

    Claims are checked first. When they say the profile is incomplete the
    user row decides: if it has since been completed, a fresh session
    carrying the new values is issued and the request goes through.
    """
    if claims.is_profile_complete:
        return user

    if not user.is_profile_complete:
        raise ProfileIncomplete(missing_fields=user.missing_profile_fields)

    token, _ = create_session_token(user)
    set_session_cookie(response, token)
    logger.info("Reissued stale session for user %s after profile completion", user.id)
    return user
