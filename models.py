from enum import Enum
from typing import Optional
from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field
from sqlalchemy import CheckConstraint, Column, DateTime


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    # Not produced yet, declared so the status column accepts them later.
    PENDING = "pending"
    CANCELLED = "cancelled"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in ReservationStatus)


class Reservation(SQLModel, table=True):
    __tablename__ = "reservations"
    __table_args__ = (
        # Database-level copies of the booking invariants
        CheckConstraint("checkout_date > checkin_date", name="check_reservation_date_order"),
        CheckConstraint("houses BETWEEN 1 AND 4", name="check_reservation_houses"),
        CheckConstraint("guests > 0 AND guests <= houses * 5", name="check_reservation_guests"),
        CheckConstraint("total_price >= 0", name="check_reservation_price"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="check_reservation_status"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: str
    checkin_date: date = Field(index=True)
    checkout_date: date = Field(index=True)
    guests: int
    houses: int
    special_requests: str = ""
    total_price: float
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    status: str = Field(default=ReservationStatus.CONFIRMED.value, max_length=20, index=True)
