from . import models


def is_booker(booking: models.Booking, user_id: int) -> bool:
    return booking.booker_id == user_id


def is_owner(booking: models.Booking, user_id: int) -> bool:
    return booking.item.owner_id == user_id


def is_booker_or_owner(booking: models.Booking, user_id: int) -> bool:
    return is_booker(booking, user_id) or is_owner(booking, user_id)
