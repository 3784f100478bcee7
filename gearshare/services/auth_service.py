# File: gearshare/services/auth_service.py

"""
Authentication service.

  - Signup with email + password
  - Credential verification for password logins
  - User provisioning for OAuth logins
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gearshare.core.exceptions import (
    AccountNotFound,
    DuplicateAccount,
    DuplicatePhoneNumber,
    InvalidCredentials,
    OAuthAccountNotLinked,
    UnsupportedLoginMethod,
)
from gearshare.core.security import hash_password, verify_password
from gearshare.models.account import Account
from gearshare.models.user import OAuthIdentity, User
from gearshare.schemas.user import SignupRequest
from gearshare.services.oauth import OAuthProfile

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def get_user_by_phone_number(db: Session, phone_number: str) -> User | None:
    return db.scalar(select(User).where(User.phone_number == phone_number))


def raise_for_conflict(
    db: Session,
    *,
    email: str | None,
    phone_number: str | None,
    exclude_id: str | None = None,
) -> None:
    """
    Raise the conflict error matching an existing row, if any.

    Used both as a pre-check and to explain an IntegrityError after the
    database rejected a write.
    """
    if email is not None:
        existing = get_user_by_email(db, email)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateAccount()
    if phone_number is not None:
        existing = get_user_by_phone_number(db, phone_number)
        if existing is not None and existing.id != exclude_id:
            raise DuplicatePhoneNumber()


def signup_user(db: Session, payload: SignupRequest) -> User:
    """
    Create a local-credential account.

    Raises:
        DuplicateAccount: email already registered (nothing is written)
        DuplicatePhoneNumber: phone number belongs to another account
    """
    raise_for_conflict(db, email=payload.email, phone_number=payload.phone_number)

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name,
        birthday=payload.birthday,
        phone_number=payload.phone_number,
        email_verified=None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup
        db.rollback()
        raise_for_conflict(db, email=payload.email, phone_number=payload.phone_number)
        raise
    db.refresh(user)

    logger.info("Registered new user %s (%s)", user.id, user.email)
    return user


def authenticate_user(db: Session, *, email: str, password: str) -> User:
    """
    Verify an email + password pair.

    Raises:
        AccountNotFound: no user with this email
        UnsupportedLoginMethod: the account signs in through an OAuth provider
        InvalidCredentials: wrong password
    """
    user = get_user_by_email(db, email)
    if user is None:
        logger.warning("Credentials login attempt for non-existent user: %s", email)
        raise AccountNotFound()

    credential = user.credential
    if isinstance(credential, OAuthIdentity):
        logger.warning(
            "Credentials login attempt for %s, which signs in with %s", email, credential.provider
        )
        raise UnsupportedLoginMethod()

    if not verify_password(password, credential.password_hash):
        logger.warning("Invalid password attempt for user: %s", email)
        raise InvalidCredentials()

    logger.info("User %s authenticated with credentials", user.id)
    return user


def complete_oauth_login(db: Session, profile: OAuthProfile) -> User:
    """
    Resolve the user behind a finished OAuth handshake, creating one if needed.

    An email that already belongs to an account not linked to this provider
    identity is refused rather than linked automatically.
    """
    account = db.scalar(
        select(Account).where(
            Account.provider == profile.provider,
            Account.provider_account_id == profile.subject,
        )
    )
    if account is not None:
        logger.info("OAuth login for user %s via %s", account.user_id, profile.provider)
        return account.user

    if get_user_by_email(db, profile.email) is not None:
        logger.warning(
            "OAuth login via %s for %s refused: email belongs to an unlinked account",
            profile.provider,
            profile.email,
        )
        raise OAuthAccountNotLinked()

    user = User(
        email=profile.email,
        password_hash=None,
        name=profile.name,
        image=profile.picture,
        email_verified=datetime.now(timezone.utc) if profile.email_verified else None,
    )
    user.accounts.append(Account(provider=profile.provider, provider_account_id=profile.subject))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise_for_conflict(db, email=profile.email, phone_number=None)
        raise
    db.refresh(user)

    logger.info("Created OAuth-only user %s via %s", user.id, profile.provider)
    return user
