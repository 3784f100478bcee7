# File: gearshare/models/gear.py

"""
Gear model.

A listing a lender puts up for rent, priced per day.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gearshare.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from gearshare.models.booking import Booking
    from gearshare.models.user import User


class Gear(IdMixin, TimestampMixin, Base):
    __tablename__ = "gear"
    __table_args__ = (CheckConstraint("price_per_day > 0", name="ck_gear_price_positive"),)

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), index=True, nullable=False
    )

    owner: Mapped["User"] = relationship(back_populates="gear")
    bookings: Mapped[list["Booking"]] = relationship(back_populates="gear")
