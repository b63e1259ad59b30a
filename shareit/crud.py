import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from . import models
from .state_filter import BookingState, PageRequest, apply_state


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_item(db: Session, item_id: int) -> Optional[models.Item]:
    return db.query(models.Item).filter(models.Item.id == item_id).first()


def get_booking(db: Session, booking_id: int) -> Optional[models.Booking]:
    return db.query(models.Booking).options(
        joinedload(models.Booking.item),
        joinedload(models.Booking.booker)
    ).filter(models.Booking.id == booking_id).first()


def create_booking(
        db: Session,
        item: models.Item,
        booker: models.User,
        start_date: datetime.datetime,
        end_date: datetime.datetime
) -> models.Booking:
    """
    Inserts a new WAITING booking. The id comes from the database sequence.
    """
    db_booking = models.Booking(
        item=item,
        booker=booker,
        start_date=start_date,
        end_date=end_date,
        status=models.BookingStatus.WAITING
    )
    db.add(db_booking)
    db.commit()
    db.refresh(db_booking)
    return db_booking


def update_booking_status(db: Session, booking: models.Booking, status: models.BookingStatus) -> models.Booking:
    booking.status = status
    db.commit()
    db.refresh(booking)
    return booking


def delete_booking(db: Session, booking: models.Booking) -> None:
    db.delete(booking)
    db.commit()


def get_all_bookings(db: Session) -> List[models.Booking]:
    return db.query(models.Booking).order_by(
        models.Booking.start_date.desc(), models.Booking.id.desc()
    ).all()


def get_bookings_by_booker(
        db: Session,
        booker_id: int,
        state: BookingState,
        now: datetime.datetime,
        page: Optional[PageRequest] = None
) -> List[models.Booking]:
    query = db.query(models.Booking).filter(models.Booking.booker_id == booker_id)
    return apply_state(query, state, now, page).all()


def get_bookings_by_owner(
        db: Session,
        owner_id: int,
        state: BookingState,
        now: datetime.datetime,
        page: Optional[PageRequest] = None
) -> List[models.Booking]:
    query = db.query(models.Booking).join(models.Booking.item).filter(models.Item.owner_id == owner_id)
    return apply_state(query, state, now, page).all()


# --- Booking summaries shown next to items ---

def get_last_approved_bookings_for_items(
        db: Session,
        item_ids: List[int],
        now: datetime.datetime
) -> List[models.Booking]:
    """
    Approved bookings on the given items that have already started,
    grouped by item with the most recent start first.
    """
    if not item_ids:
        return []
    return db.query(models.Booking).filter(
        models.Booking.item_id.in_(item_ids),
        models.Booking.status == models.BookingStatus.APPROVED,
        models.Booking.start_date <= now
    ).order_by(models.Booking.item_id, models.Booking.start_date.desc()).all()


def get_next_approved_bookings_for_items(
        db: Session,
        item_ids: List[int],
        now: datetime.datetime
) -> List[models.Booking]:
    """
    Approved bookings on the given items that start in the future, earliest first.
    """
    if not item_ids:
        return []
    return db.query(models.Booking).filter(
        models.Booking.item_id.in_(item_ids),
        models.Booking.status == models.BookingStatus.APPROVED,
        models.Booking.start_date > now
    ).order_by(models.Booking.start_date.asc()).all()
