# File: gearshare/models/booking.py

"""
Booking model.

A renter's reservation of a piece of gear over an inclusive date range.
"""

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, Enum, ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gearshare.models.base import Base, IdMixin

if TYPE_CHECKING:
    from gearshare.models.gear import Gear
    from gearshare.models.user import User


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(IdMixin, Base):
    __tablename__ = "bookings"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="ck_bookings_date_order"),)

    gear_id: Mapped[str] = mapped_column(String(36), ForeignKey("gear.id"), index=True, nullable=False)
    renter_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status"),
        default=BookingStatus.PENDING,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    gear: Mapped["Gear"] = relationship(back_populates="bookings")
    renter: Mapped["User"] = relationship()

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
