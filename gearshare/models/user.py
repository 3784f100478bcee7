# File: gearshare/models/user.py

"""
User model.

A user signs in either with a local password or through a linked OAuth
account. ``User.credential`` exposes which one as a tagged value so login
code can branch on the type instead of checking a nullable column.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Union

from sqlalchemy import Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gearshare.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from gearshare.models.account import Account
    from gearshare.models.gear import Gear


@dataclass(frozen=True)
class LocalCredential:
    password_hash: str


@dataclass(frozen=True)
class OAuthIdentity:
    provider: str
    subject: str


Credential = Union[LocalCredential, OAuthIdentity]


class User(IdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    # NULL for accounts created through an OAuth provider
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)

    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(16), unique=True, nullable=True)
    email_verified: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    accounts: Mapped[list["Account"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    gear: Mapped[list["Gear"]] = relationship(back_populates="owner")

    @property
    def credential(self) -> Credential:
        if self.password_hash:
            return LocalCredential(password_hash=self.password_hash)
        if self.accounts:
            account = self.accounts[0]
            return OAuthIdentity(provider=account.provider, subject=account.provider_account_id)
        # Neither a password nor a linked provider; nothing can log in as this user
        return OAuthIdentity(provider="unknown", subject=self.id)

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
