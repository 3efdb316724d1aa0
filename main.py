import os
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from availability import check_availability as run_availability_check
from database import DATABASE_URL, Database, get_session
from errors import InvalidRequest, ReservationError
from models import Reservation
from reservations import ReservationStore
from schemas import AvailabilityRequest, AvailabilityResponse, ReservationCreate, ReservationCreated

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/check-availability - Check date availability",
    "POST /api/create-reservation - Create new reservation",
    "GET  /api/reservations - Get all reservations",
    "GET  /api/reservations/{id} - Get specific reservation",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = Database(app.state.database_url)
    await db.init_db()
    app.state.db = db
    app.state.store = ReservationStore()
    logger.info("Available endpoints:")
    for endpoint in ENDPOINTS:
        logger.info("  %s", endpoint)
    try:
        yield
    finally:
        await db.dispose()


def get_store(request: Request) -> ReservationStore:
    return request.app.state.store


def error_response(exc: ReservationError, **envelope) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={**envelope, "error": exc.message, "category": exc.category},
    )


# Failure bodies carry the same flag as the matching success body
ERROR_ENVELOPES = {
    "/api/check-availability": {"available": False},
    "/api/create-reservation": {"success": False},
}


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    details = "; ".join(problems)
    error = InvalidRequest(f"Malformed request: {details}")
    return error_response(error, **ERROR_ENVELOPES.get(request.url.path, {}))


router = APIRouter(prefix="/api")


# --- Endpoint 1: POST /api/check-availability ---
@router.post("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    body: AvailabilityRequest,
    session: AsyncSession = Depends(get_session),
):
    try:
        result = await run_availability_check(
            session, body.checkin_date, body.checkout_date, body.houses, body.guests
        )
    except ReservationError as exc:
        return error_response(exc, available=False)

    return AvailabilityResponse(
        available=result.available,
        available_houses=result.available_houses,
        requested_houses=result.requested_houses,
        message=result.message,
    )


# --- Endpoint 2: POST /api/create-reservation ---
@router.post("/create-reservation", response_model=ReservationCreated)
async def create_reservation(
    body: ReservationCreate,
    session: AsyncSession = Depends(get_session),
    store: ReservationStore = Depends(get_store),
):
    try:
        reservation = await store.create(session, body)
    except ReservationError as exc:
        return error_response(exc, success=False)

    return ReservationCreated(reservation_id=reservation.id)


# --- Endpoint 3: GET /api/reservations ---
@router.get("/reservations", response_model=List[Reservation])
async def list_reservations(
    session: AsyncSession = Depends(get_session),
    store: ReservationStore = Depends(get_store),
):
    try:
        return await store.list(session)
    except ReservationError as exc:
        return error_response(exc)


# --- Endpoint 4: GET /api/reservations/{reservation_id} ---
@router.get("/reservations/{reservation_id}", response_model=Reservation)
async def get_reservation(
    reservation_id: int,
    session: AsyncSession = Depends(get_session),
    store: ReservationStore = Depends(get_store),
):
    try:
        return await store.get(session, reservation_id)
    except ReservationError as exc:
        return error_response(exc)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    app = FastAPI(title="House Reservation System", lifespan=lifespan)
    app.state.database_url = database_url or DATABASE_URL
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()


def run():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.environ.get("PORT", "3000"))
    logger.info("Server running on http://localhost:%s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
