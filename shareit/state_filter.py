import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from sqlalchemy import and_

from . import models
from .exceptions import BadRequestError


class BookingState(str, Enum):
    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int

    @property
    def offset(self) -> int:
        return self.page * self.size


def parse_state(raw: Union[str, BookingState, None]) -> BookingState:
    """
    Resolves a state tag case-insensitively. A missing or blank tag means ALL;
    padded values such as " all " are unknown.
    """
    if isinstance(raw, BookingState):
        return raw
    if raw is None or not raw.strip():
        return BookingState.ALL
    try:
        return BookingState(raw.upper())
    except ValueError:
        raise BadRequestError(f"Unknown state: {raw}")


def resolve_page(from_: Optional[int], size: Optional[int]) -> Optional[PageRequest]:
    """
    Turns an item offset and a page length into a page request.

    Returns None (unpaged) when either value is missing, ``from_`` is negative
    or ``size`` is not positive. ``from_`` is rounded down to the page that
    contains it.
    """
    if from_ is None or size is None or from_ < 0 or size <= 0:
        return None
    return PageRequest(page=from_ // size, size=size)


def state_clause(state: BookingState, now: datetime.datetime):
    """
    Builds the SQL filter for a state, or None when the state matches everything.
    """
    Booking = models.Booking
    if state == BookingState.ALL:
        return None
    if state == BookingState.CURRENT:
        return and_(Booking.start_date <= now, Booking.end_date > now)
    if state == BookingState.PAST:
        return Booking.end_date < now
    if state == BookingState.FUTURE:
        return Booking.start_date > now
    if state == BookingState.WAITING:
        return Booking.status == models.BookingStatus.WAITING
    if state == BookingState.REJECTED:
        return Booking.status == models.BookingStatus.REJECTED
    raise BadRequestError(f"Unknown state: {state}")


def matches(booking: models.Booking, state: BookingState, now: datetime.datetime) -> bool:
    """In-memory twin of ``state_clause`` for a single booking."""
    window = booking.window
    if state == BookingState.ALL:
        return True
    if state == BookingState.CURRENT:
        return window.contains(now)
    if state == BookingState.PAST:
        return window.has_ended(now)
    if state == BookingState.FUTURE:
        return window.is_upcoming(now)
    if state == BookingState.WAITING:
        return booking.status == models.BookingStatus.WAITING
    if state == BookingState.REJECTED:
        return booking.status == models.BookingStatus.REJECTED
    raise BadRequestError(f"Unknown state: {state}")


def apply_state(query, state: BookingState, now: datetime.datetime, page: Optional[PageRequest]):
    """
    Filters, orders (newest start first) and optionally pages a Booking query.
    """
    clause = state_clause(state, now)
    if clause is not None:
        query = query.filter(clause)
    query = query.order_by(models.Booking.start_date.desc(), models.Booking.id.desc())
    if page is not None:
        query = query.offset(page.offset).limit(page.size)
    return query
