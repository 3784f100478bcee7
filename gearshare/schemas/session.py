# File: gearshare/schemas/session.py

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel

from gearshare.schemas.user import UserRead


class SessionClaims(BaseModel):
    """
    What a signed session token carries.

    Profile fields are copied from the user when the token is minted and are
    not refreshed until a new token is issued from the database row.
    """

    sub: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    birthday: Optional[date] = None
    phone_number: Optional[str] = None
    iat: int
    exp: int

    @property
    def missing_profile_fields(self) -> list[str]:
        missing = []
        if self.birthday is None:
            missing.append("birthday")
        if not self.phone_number:
            missing.append("phone_number")
        return missing

    @property
    def is_profile_complete(self) -> bool:
        return not self.missing_profile_fields

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class SessionUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    birthday: Optional[date] = None
    phone_number: Optional[str] = None


class SessionResponse(BaseModel):
    user: SessionUser
    expires: datetime

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "SessionResponse":
        return cls(
            user=SessionUser(
                id=claims.sub,
                email=claims.email,
                name=claims.name,
                image=claims.picture,
                birthday=claims.birthday,
                phone_number=claims.phone_number,
            ),
            expires=claims.expires_at,
        )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead
