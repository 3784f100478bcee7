# File: gearshare/api/v1/routes_users.py

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gearshare.api.deps import get_current_user, get_db, require_complete_profile
from gearshare.models.user import User
from gearshare.schemas.user import ProfileRead, ProfileUpdate, PublicProfile
from gearshare.services import user_service

router = APIRouter()


def _profile_read(user: User) -> ProfileRead:
    return ProfileRead(
        id=user.id,
        name=user.name,
        birthday=user.birthday,
        phone_number=user.phone_number,
        profile_complete=user.is_profile_complete,
    )


@router.get("/me", response_model=PublicProfile, summary="Signed-in user's profile")
def read_me(user: User = Depends(require_complete_profile)):
    return user


@router.patch("/me", response_model=ProfileRead, summary="Update the signed-in user's profile")
def update_me(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Used by onboarding to fill in birthday and phone number.

    The current session token keeps its old claims; clients that need the
    new values fetch the session again or go through a gated route.
    """
    user = user_service.update_profile(db, user, payload)
    return _profile_read(user)


@router.get("/{user_id}", response_model=Optional[PublicProfile], summary="Public profile, or null")
def read_profile(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)
