from datetime import date
from typing import Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


# Request and response bodies travel in camelCase
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Every field is optional at the parsing layer so missing ones are reported
# together as an invalid request instead of a generic validation error
class AvailabilityRequest(CamelModel):
    checkin_date: Optional[date] = None
    checkout_date: Optional[date] = None
    houses: Optional[int] = None
    guests: Optional[int] = None


class AvailabilityResponse(CamelModel):
    available: bool
    available_houses: int
    requested_houses: int
    message: str


class ReservationCreate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    checkin_date: Optional[date] = None
    checkout_date: Optional[date] = None
    guests: Optional[int] = None
    houses: Optional[int] = None
    special_requests: Optional[str] = None
    total_price: Optional[float] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        # Validate only; the address is stored exactly as the guest typed it
        if value:
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError as exc:
                raise ValueError(str(exc)) from exc
        return value


class ReservationCreated(CamelModel):
    success: bool = True
    reservation_id: int
    message: str = "Reservation created successfully"
