# File: gearshare/services/user_service.py

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gearshare.models.user import User
from gearshare.schemas.user import ProfileUpdate
from gearshare.services.auth_service import raise_for_conflict

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    """
    Apply the fields present in ``payload`` to ``user``.

    Name and birthday can be changed but not removed; the phone number can
    be cleared with an explicit null.
    """
    provided = payload.model_fields_set

    if "phone_number" in provided and payload.phone_number != user.phone_number:
        raise_for_conflict(db, email=None, phone_number=payload.phone_number, exclude_id=user.id)
        user.phone_number = payload.phone_number
    if "name" in provided and payload.name is not None:
        user.name = payload.name
    if "birthday" in provided and payload.birthday is not None:
        user.birthday = payload.birthday

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise_for_conflict(db, email=None, phone_number=payload.phone_number, exclude_id=user.id)
        raise
    db.refresh(user)

    logger.info(
        "Updated profile for user %s (fields: %s)", user.id, ", ".join(sorted(provided)) or "none"
    )
    return user
