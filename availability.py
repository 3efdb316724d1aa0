"""
Availability checking for the four houses.

Every caller that needs to know how many houses are already committed for a
date range goes through ``houses_booked``, so the read-only check and the
reservation write path always agree on what counts as a conflict.

Date ranges are half-open: ``[checkin, checkout)``. A stay that ends on the
day another one starts does not conflict with it.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from errors import CapacityExceeded, InvalidDateRange, InvalidRequest, StorageFailure
from models import Reservation, ReservationStatus

logger = logging.getLogger(__name__)

TOTAL_HOUSES = 4
GUESTS_PER_HOUSE = 5


@dataclass
class AvailabilityResult:
    available: bool
    available_houses: int
    requested_houses: int
    message: str


def pluralize(count: int, word: str = "house") -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ---------- Validation ----------

def require_fields(fields: Mapping[str, object]):
    """Raise InvalidRequest naming every field that is absent or blank."""
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise InvalidRequest(f"Missing required fields: {', '.join(missing)}")


def validate_counts(houses: int, guests: Optional[int] = None):
    if not 1 <= houses <= TOTAL_HOUSES:
        raise InvalidRequest(f"Houses must be between 1 and {TOTAL_HOUSES}")
    if guests is not None and guests < 1:
        raise InvalidRequest("Guests must be at least 1")


def validate_date_range(checkin_date: date, checkout_date: date):
    if checkout_date <= checkin_date:
        raise InvalidDateRange("Checkout date must be after checkin date")


def validate_capacity(houses: int, guests: Optional[int]):
    if guests is not None and guests > houses * GUESTS_PER_HOUSE:
        raise CapacityExceeded(
            f"Maximum {houses * GUESTS_PER_HOUSE} guests allowed for {pluralize(houses)} "
            f"({GUESTS_PER_HOUSE} guests per house)"
        )


# ---------- Overlap computation ----------

def dates_overlap(start1: date, end1: date, start2: date, end2: date) -> bool:
    return start1 < end2 and end1 > start2


def committed_houses(reservations: Iterable[Reservation], checkin_date: date, checkout_date: date) -> int:
    """Sum houses over confirmed reservations overlapping [checkin_date, checkout_date)."""
    return sum(
        r.houses
        for r in reservations
        if r.status == ReservationStatus.CONFIRMED.value
        and dates_overlap(r.checkin_date, r.checkout_date, checkin_date, checkout_date)
    )


async def houses_booked(session: AsyncSession, checkin_date: date, checkout_date: date) -> int:
    # Narrow in SQL with the same predicate, then let committed_houses decide
    statement = select(Reservation).where(
        Reservation.status == ReservationStatus.CONFIRMED.value,
        Reservation.checkin_date < checkout_date,
        Reservation.checkout_date > checkin_date,
    )
    result = await session.execute(statement)
    return committed_houses(result.scalars().all(), checkin_date, checkout_date)


def summarize(booked: int, requested_houses: int) -> AvailabilityResult:
    available_houses = TOTAL_HOUSES - booked
    available = available_houses >= requested_houses

    if available:
        message = (
            f"{pluralize(requested_houses)} available for the selected dates "
            f"(capacity: {requested_houses * GUESTS_PER_HOUSE} guests)"
        )
    elif available_houses <= 0:
        message = f"No houses available for the specified dates. All {TOTAL_HOUSES} houses are booked."
    else:
        message = (
            f"Only {pluralize(available_houses)} available for the selected dates "
            f"(requested: {requested_houses})"
        )

    return AvailabilityResult(
        available=available,
        available_houses=available_houses,
        requested_houses=requested_houses,
        message=message,
    )


async def check_availability(
    session: AsyncSession,
    checkin_date: Optional[date],
    checkout_date: Optional[date],
    houses: Optional[int],
    guests: Optional[int] = None,
) -> AvailabilityResult:
    require_fields({"checkinDate": checkin_date, "checkoutDate": checkout_date, "houses": houses})
    # A guest count of 0 counts as not given
    if guests == 0:
        guests = None
    validate_counts(houses, guests)
    validate_date_range(checkin_date, checkout_date)
    validate_capacity(houses, guests)

    try:
        booked = await houses_booked(session, checkin_date, checkout_date)
    except SQLAlchemyError as exc:
        logger.error("Database error during availability check: %s", exc)
        raise StorageFailure("Database error") from exc

    return summarize(booked, houses)
