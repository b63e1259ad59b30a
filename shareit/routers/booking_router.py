from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Annotated, Optional
import logging

from .. import schemas
from ..booking_service import BookingService
from ..config import settings
from ..database import get_db

logger = logging.getLogger("booking_service")

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_current_user_id(
        user_id: Annotated[int, Header(alias=settings.USER_ID_HEADER)]
) -> int:
    """
    The gateway has already validated the identity header; it only needs reading here.
    """
    return user_id


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


# Responses are built inside the handlers while the session is still open.

@router.post("", response_model=schemas.BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
        booking: schemas.BookingCreate,
        response: Response,
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service)
):
    """
    Create a new booking for the calling user.
    """
    logger.info("Processing request to create a new booking...")
    db_booking = service.create(user_id, booking)
    response.headers["Location"] = f"/bookings/{db_booking.id}"
    return schemas.BookingRead.model_validate(db_booking)


@router.patch("/{booking_id}", response_model=schemas.BookingRead)
def approve_booking(
        booking_id: int,
        approved: bool,
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service)
):
    logger.info(f"Processing request to {'approve' if approved else 'reject'} booking with id {booking_id}")
    return schemas.BookingRead.model_validate(service.approve(booking_id, user_id, approved))


@router.get("/owner", response_model=List[schemas.BookingRead])
def read_owner_bookings(
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service),
        state: str = settings.DEFAULT_STATE,
        from_: Annotated[Optional[int], Query(alias="from")] = None,
        size: Optional[int] = None
):
    """
    Get the bookings made on items the calling user owns.
    """
    logger.info(f"Processing request to fetch {state.lower()} bookings by item owner with id: {user_id}")
    bookings = service.list_by_owner(user_id, state, from_, size)
    return [schemas.BookingRead.model_validate(b) for b in bookings]


@router.get("/{booking_id}", response_model=schemas.BookingRead)
def read_booking(
        booking_id: int,
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service)
):
    logger.info(f"Processing request to fetch booking by id: {booking_id}")
    return schemas.BookingRead.model_validate(service.get_by_id(booking_id, user_id))


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_booking(
        booking_id: int,
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service)
):
    logger.info(f"Processing request to cancel booking with id: {booking_id}")
    service.cancel(booking_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=List[schemas.BookingRead])
def read_user_bookings(
        user_id: Annotated[int, Depends(get_current_user_id)],
        service: BookingService = Depends(get_booking_service),
        state: str = settings.DEFAULT_STATE,
        from_: Annotated[Optional[int], Query(alias="from")] = None,
        size: Optional[int] = None
):
    """
    Get the bookings the calling user has made.
    """
    logger.info(f"Processing request to fetch {state.lower()} bookings by booker with id: {user_id}")
    bookings = service.list_by_booker(user_id, state, from_, size)
    return [schemas.BookingRead.model_validate(b) for b in bookings]
