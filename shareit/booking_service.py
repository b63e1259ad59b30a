"""
Booking lifecycle: creation, approval, lookup, cancellation and the
state-filtered listings for bookers and item owners.

``BookingService`` is built per request with the request's database session.
Every check runs before anything is written, so a rejected call leaves the
store untouched. Concurrent creates on one item are not serialized here and
rely on whatever isolation the database gives a single session.

``get_all`` and ``get_item_booking_info`` are not routed here: the item module
calls them when it renders items (with their last and next approved booking)
for the item's owner.
"""
import datetime
import logging
from typing import Callable, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from . import access, crud, models, schemas
from .availability import BookingRejection, first_rejection
from .exceptions import (
    AccessDeniedError,
    BadRequestError,
    BookingNotFoundError,
    ItemNotFoundError,
    UserNotFoundError,
)
from .state_filter import BookingState, parse_state, resolve_page
from .time_window import TimeWindow

logger = logging.getLogger("booking_service")


class BookingService:

    def __init__(self, db: Session, clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.db = db
        self.clock = clock

    # --- lookups shared by the operations ---

    def _require_user(self, user_id: int) -> models.User:
        user = crud.get_user(self.db, user_id)
        if user is None:
            logger.warning(f"User with id {user_id} not found")
            raise UserNotFoundError(f"User with id {user_id} not found")
        return user

    def _require_item(self, item_id: int) -> models.Item:
        item = crud.get_item(self.db, item_id)
        if item is None:
            logger.warning(f"Item with id {item_id} not found")
            raise ItemNotFoundError(f"Item with id {item_id} not found")
        return item

    def _require_booking(self, booking_id: int) -> models.Booking:
        booking = crud.get_booking(self.db, booking_id)
        if booking is None:
            logger.warning(f"Booking with id {booking_id} not found")
            raise BookingNotFoundError(f"Booking with id {booking_id} not found")
        return booking

    @staticmethod
    def _rejection_message(rejection: BookingRejection, item_id: int, booker_id: int) -> str:
        if rejection == BookingRejection.SELF_BOOKING:
            return f"User with id {booker_id} is the owner of item with id {item_id}"
        if rejection == BookingRejection.ITEM_UNAVAILABLE:
            return f"Item with id {item_id} is not available"
        if rejection == BookingRejection.START_IN_PAST:
            return "Booking start time cannot be in the past"
        return "Booking end time must be after start time"

    # --- operations ---

    def create(self, booker_id: int, booking: schemas.BookingCreate) -> models.Booking:
        """
        Creates a WAITING booking of ``booking.item_id`` for ``booker_id``.

        Raises UserNotFoundError, ItemNotFoundError, then BadRequestError for
        self-booking, an unavailable item, a start in the past or an end that
        is not after the start, in that order.
        """
        booker = self._require_user(booker_id)
        item = self._require_item(booking.item_id)

        window = TimeWindow(start=booking.start, end=booking.end)
        rejection = first_rejection(item, booker_id, window, self.clock())
        if rejection is not None:
            message = self._rejection_message(rejection, item.id, booker_id)
            logger.warning(f"Rejected booking of item {item.id} by user {booker_id}: {rejection.value}")
            raise BadRequestError(message)

        db_booking = crud.create_booking(
            self.db, item=item, booker=booker, start_date=window.start, end_date=window.end
        )
        logger.info(f"Created booking {db_booking.id} of item {item.id} for user {booker_id}")
        return db_booking

    def approve(self, booking_id: int, caller_id: int, approved: bool) -> models.Booking:
        """
        Sets a booking to APPROVED or REJECTED. Only the item owner may do this.
        A booking that was already decided can be decided again.
        """
        booking = self._require_booking(booking_id)
        if not access.is_owner(booking, caller_id):
            logger.warning(f"User with id {caller_id} is not the owner of item in booking with id {booking_id}")
            raise AccessDeniedError(
                f"User with id {caller_id} is not the owner of item in booking with id {booking_id}"
            )

        status = models.BookingStatus.APPROVED if approved else models.BookingStatus.REJECTED
        booking = crud.update_booking_status(self.db, booking, status)
        logger.info(f"Booking {booking_id} set to {status.name} by owner {caller_id}")
        return booking

    def get_by_id(self, booking_id: int, caller_id: int) -> models.Booking:
        self._require_user(caller_id)
        booking = self._require_booking(booking_id)
        if not access.is_booker_or_owner(booking, caller_id):
            logger.warning(f"User with id {caller_id} is not the booker or owner of booking with id {booking_id}")
            raise AccessDeniedError(
                f"User with id {caller_id} is not the booker or owner of booking with id {booking_id}"
            )
        return booking

    def cancel(self, booking_id: int, caller_id: int) -> None:
        """Deletes a booking for good. Any status may be cancelled by its booker."""
        self._require_user(caller_id)
        booking = self._require_booking(booking_id)
        if not access.is_booker(booking, caller_id):
            logger.warning(f"Booking with id {booking_id} does not belong to user with id {caller_id}")
            raise AccessDeniedError(f"Booking with id {booking_id} does not belong to user with id {caller_id}")

        crud.delete_booking(self.db, booking)
        logger.info(f"Booking {booking_id} cancelled by booker {caller_id}")

    def list_by_booker(
            self,
            booker_id: int,
            state: Union[str, BookingState, None] = BookingState.ALL,
            from_: Optional[int] = None,
            size: Optional[int] = None
    ) -> List[models.Booking]:
        booking_state = parse_state(state)
        self._require_user(booker_id)
        page = resolve_page(from_, size)
        bookings = crud.get_bookings_by_booker(self.db, booker_id, booking_state, self.clock(), page)
        logger.debug(f"Fetched {len(bookings)} {booking_state.name} bookings for booker {booker_id}")
        return bookings

    def list_by_owner(
            self,
            owner_id: int,
            state: Union[str, BookingState, None] = BookingState.ALL,
            from_: Optional[int] = None,
            size: Optional[int] = None
    ) -> List[models.Booking]:
        booking_state = parse_state(state)
        self._require_user(owner_id)
        page = resolve_page(from_, size)
        bookings = crud.get_bookings_by_owner(self.db, owner_id, booking_state, self.clock(), page)
        logger.debug(f"Fetched {len(bookings)} {booking_state.name} bookings for owner {owner_id}")
        return bookings

    def get_all(self) -> List[models.Booking]:
        bookings = crud.get_all_bookings(self.db)
        logger.debug(f"Fetched {len(bookings)} bookings")
        return bookings

    def get_item_booking_info(self, item_ids: List[int]) -> Dict[int, schemas.ItemBookingInfo]:
        """
        Finds, per item, the latest approved booking that has started and the
        earliest approved booking still to come.
        """
        now = self.clock()
        info = {item_id: schemas.ItemBookingInfo() for item_id in item_ids}

        for booking in crud.get_last_approved_bookings_for_items(self.db, item_ids, now):
            entry = info[booking.item_id]
            if entry.last is None:
                entry.last = schemas.BookingShort.model_validate(booking)

        for booking in crud.get_next_approved_bookings_for_items(self.db, item_ids, now):
            entry = info[booking.item_id]
            if entry.next is None:
                entry.next = schemas.BookingShort.model_validate(booking)

        return info
