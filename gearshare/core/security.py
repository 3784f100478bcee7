# File: gearshare/core/security.py

"""
Security helpers for the GearShare API.

  - Password hashing with bcrypt (salted, cost 10)
  - Signed session tokens (JWT, HS256) carrying SessionClaims
  - Short-lived signed OAuth ``state`` values
"""

import logging
import secrets
import time
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError

from gearshare.core.config import settings
from gearshare.core.exceptions import NotAuthenticated
from gearshare.core.validators import PASSWORD_MAX_BYTES
from gearshare.models.user import User
from gearshare.schemas.session import SessionClaims

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
OAUTH_STATE_PURPOSE = "oauth-state"


# ----------------------------------------------------
# Passwords
# ----------------------------------------------------
def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    candidate = password.encode("utf-8")
    if len(candidate) > PASSWORD_MAX_BYTES:
        # Never stored, so it cannot match
        return False
    try:
        return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.error("Stored password hash is malformed")
        return False


# ----------------------------------------------------
# Session tokens
# ----------------------------------------------------
def _encode(payload: dict[str, Any]) -> str:
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def claims_for_user(user: User, now: Optional[int] = None) -> SessionClaims:
    """Snapshot the user's identity and profile fields as session claims."""
    issued_at = now if now is not None else int(time.time())
    return SessionClaims(
        sub=user.id,
        email=user.email,
        name=user.name,
        picture=user.image,
        birthday=user.birthday,
        phone_number=user.phone_number,
        iat=issued_at,
        exp=issued_at + settings.session_max_age_seconds,
    )


def encode_session_claims(claims: SessionClaims) -> str:
    return _encode(claims.model_dump(mode="json"))


def create_session_token(user: User) -> tuple[str, SessionClaims]:
    claims = claims_for_user(user)
    return encode_session_claims(claims), claims


def refresh_session_claims(claims: SessionClaims, now: Optional[int] = None) -> SessionClaims:
    """Same claims, new lifetime. Profile fields are not re-read."""
    issued_at = now if now is not None else int(time.time())
    return claims.model_copy(
        update={"iat": issued_at, "exp": issued_at + settings.session_max_age_seconds}
    )


def should_refresh(claims: SessionClaims, now: Optional[int] = None) -> bool:
    now = now if now is not None else int(time.time())
    return now - claims.iat >= settings.session_update_age_seconds


def decode_session_token(token: str) -> SessionClaims:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        raise NotAuthenticated() from e

    if payload.get("purpose"):
        # Some other signed value (e.g. OAuth state) presented as a session
        raise NotAuthenticated()

    try:
        return SessionClaims.model_validate(payload)
    except ValidationError as e:
        logger.warning("Session token has malformed claims: %s", e.errors())
        raise NotAuthenticated() from e


# ----------------------------------------------------
# OAuth state
# ----------------------------------------------------
def create_oauth_state(provider: str, callback_url: str) -> str:
    now = int(time.time())
    return _encode(
        {
            "purpose": OAUTH_STATE_PURPOSE,
            "provider": provider,
            "callback_url": callback_url,
            "nonce": secrets.token_urlsafe(16),
            "iat": now,
            "exp": now + settings.oauth_state_max_age_seconds,
        }
    )


def decode_oauth_state(state: str, provider: str) -> Optional[dict[str, Any]]:
    """Return the state payload, or None if it is forged, expired or for another provider."""
    try:
        payload = jwt.decode(state, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("purpose") != OAUTH_STATE_PURPOSE or payload.get("provider") != provider:
        return None
    return payload
