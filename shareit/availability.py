"""
Creation-time checks for a new booking.

Each check returns a ``BookingRejection`` (or ``None`` when it passes) instead
of raising, so the booking service decides the error type and the order in
which the checks run.
"""
import datetime
from enum import Enum
from typing import Optional

from . import models
from .time_window import TimeWindow


class BookingRejection(Enum):
    SELF_BOOKING = "self_booking"
    ITEM_UNAVAILABLE = "item_unavailable"
    START_IN_PAST = "start_in_past"
    END_NOT_AFTER_START = "end_not_after_start"


def check_not_owner(item: models.Item, booker_id: int) -> Optional[BookingRejection]:
    if item.owner_id == booker_id:
        return BookingRejection.SELF_BOOKING
    return None


def check_item_available(item: models.Item) -> Optional[BookingRejection]:
    if not item.available:
        return BookingRejection.ITEM_UNAVAILABLE
    return None


def check_start_not_past(window: TimeWindow, now: datetime.datetime) -> Optional[BookingRejection]:
    if window.starts_before(now):
        return BookingRejection.START_IN_PAST
    return None


def check_end_after_start(window: TimeWindow) -> Optional[BookingRejection]:
    if not window.is_ordered:
        return BookingRejection.END_NOT_AFTER_START
    return None


def first_rejection(
        item: models.Item,
        booker_id: int,
        window: TimeWindow,
        now: datetime.datetime
) -> Optional[BookingRejection]:
    """
    Runs every check in creation order and returns the first failure.
    """
    checks = (
        lambda: check_not_owner(item, booker_id),
        lambda: check_item_available(item),
        lambda: check_start_not_past(window, now),
        lambda: check_end_after_start(window),
    )
    for check in checks:
        rejection = check()
        if rejection is not None:
            return rejection
    return None
