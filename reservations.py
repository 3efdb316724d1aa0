import asyncio
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from availability import (
    TOTAL_HOUSES,
    houses_booked,
    pluralize,
    require_fields,
    validate_capacity,
    validate_counts,
    validate_date_range,
)
from errors import CapacityConflict, InvalidRequest, NotFound, StorageFailure
from models import Reservation, ReservationStatus
from schemas import ReservationCreate

logger = logging.getLogger(__name__)


class ReservationStore:
    """Append-only access to the reservations table.

    Writes are serialized through one lock per store: the availability
    re-check, the insert and the commit run as a single critical section, so
    two requests for the last houses cannot both pass the check. The
    application keeps exactly one store for its whole lifetime.
    """

    def __init__(self):
        self._write_lock = asyncio.Lock()

    async def create(self, session: AsyncSession, payload: ReservationCreate) -> Reservation:
        require_fields({
            "firstName": payload.first_name,
            "lastName": payload.last_name,
            "email": payload.email,
            "checkinDate": payload.checkin_date,
            "checkoutDate": payload.checkout_date,
            "guests": payload.guests,
            "houses": payload.houses,
            "totalPrice": payload.total_price,
        })
        validate_counts(payload.houses, payload.guests)
        if payload.total_price < 0:
            raise InvalidRequest("Total price cannot be negative")
        validate_capacity(payload.houses, payload.guests)
        validate_date_range(payload.checkin_date, payload.checkout_date)

        async with self._write_lock:
            try:
                booked = await houses_booked(session, payload.checkin_date, payload.checkout_date)
                available_houses = TOTAL_HOUSES - booked
                if available_houses < payload.houses:
                    logger.warning(
                        "Rejected %s for %s..%s: only %s free",
                        pluralize(payload.houses), payload.checkin_date,
                        payload.checkout_date, available_houses,
                    )
                    raise CapacityConflict(
                        f"Only {pluralize(max(available_houses, 0))} available for the selected dates"
                    )

                reservation = Reservation(
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    email=payload.email,
                    checkin_date=payload.checkin_date,
                    checkout_date=payload.checkout_date,
                    guests=payload.guests,
                    houses=payload.houses,
                    special_requests=payload.special_requests or "",
                    total_price=payload.total_price,
                    status=ReservationStatus.CONFIRMED.value,
                )
                session.add(reservation)
                await session.commit()
                await session.refresh(reservation)
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Database error during reservation creation: %s", exc)
                raise StorageFailure("Failed to create reservation") from exc

        logger.info(
            "Reservation %s created: %s for %s..%s",
            reservation.id, pluralize(reservation.houses),
            reservation.checkin_date, reservation.checkout_date,
        )
        return reservation

    async def list(self, session: AsyncSession) -> List[Reservation]:
        statement = select(Reservation).order_by(
            col(Reservation.created_at).desc(), col(Reservation.id).desc()
        )
        try:
            result = await session.execute(statement)
        except SQLAlchemyError as exc:
            logger.error("Database error while listing reservations: %s", exc)
            raise StorageFailure("Database error") from exc
        return list(result.scalars().all())

    async def get(self, session: AsyncSession, reservation_id: int) -> Reservation:
        try:
            reservation = await session.get(Reservation, reservation_id)
        except SQLAlchemyError as exc:
            logger.error("Database error while loading reservation %s: %s", reservation_id, exc)
            raise StorageFailure("Database error") from exc
        if reservation is None:
            raise NotFound("Reservation not found")
        return reservation
