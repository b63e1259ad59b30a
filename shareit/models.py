from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum

from .database import Base
from .time_window import TimeWindow


# --- ENUM for Item availability ---
class ItemStatus(PyEnum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


# --- ENUM for Booking approval ---
class BookingStatus(PyEnum):
    WAITING = "waiting"
    APPROVED = "approved"
    REJECTED = "rejected"


# --- User Model (owned by the user module, read here) ---
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    items = relationship("Item", back_populates="owner")
    bookings = relationship("Booking", back_populates="booker")


# --- Item Model (owned by the item module, read here) ---
class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(SQLEnum(ItemStatus), default=ItemStatus.AVAILABLE, nullable=False)

    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    owner = relationship("User", back_populates="items")
    bookings = relationship("Booking", back_populates="item")

    @property
    def available(self) -> bool:
        return self.status == ItemStatus.AVAILABLE


# --- Booking Model ---
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    booker_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    status = Column(SQLEnum(BookingStatus), default=BookingStatus.WAITING, nullable=False)

    item = relationship("Item", back_populates="bookings")
    booker = relationship("User", back_populates="bookings")

    # Listing queries filter by booker or item and sort by start
    __table_args__ = (
        Index("ix_bookings_booker_start", "booker_id", "start_date"),
        Index("ix_bookings_item_start", "item_id", "start_date"),
    )

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start=self.start_date, end=self.end_date)

    def __repr__(self):
        return (
            f"Booking(id={self.id}, start={self.start_date}, end={self.end_date}, "
            f"item_id={self.item_id}, booker_id={self.booker_id}, status={self.status})"
        )
