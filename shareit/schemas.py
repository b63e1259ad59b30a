from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from typing import Optional
import datetime


def _to_naive_local(value: datetime.datetime) -> datetime.datetime:
    # Stored windows and "now" are naive local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class BookingCreate(BaseModel):
    # booker comes from the identity header
    item_id: int = Field(validation_alias=AliasChoices("itemId", "item_id"))
    start: datetime.datetime
    end: datetime.datetime

    @field_validator("start", "end")
    @classmethod
    def strip_timezone(cls, value: datetime.datetime) -> datetime.datetime:
        return _to_naive_local(value)


class UserRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ItemRead(BaseModel):
    id: int
    name: str
    description: str
    available: bool

    model_config = ConfigDict(from_attributes=True)


class BookingRead(BaseModel):
    id: int
    item: ItemRead
    booker: UserRead
    start: datetime.datetime = Field(validation_alias=AliasChoices("start_date", "start"))
    end: datetime.datetime = Field(validation_alias=AliasChoices("end_date", "end"))
    status: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("status", mode="before")
    @classmethod
    def status_name(cls, value):
        # BookingStatus.APPROVED -> "APPROVED"
        return getattr(value, "name", value)


class BookingShort(BaseModel):
    id: int
    booker_id: int
    item_id: int
    start: datetime.datetime = Field(validation_alias=AliasChoices("start_date", "start"))
    end: datetime.datetime = Field(validation_alias=AliasChoices("end_date", "end"))

    model_config = ConfigDict(from_attributes=True)


class ItemBookingInfo(BaseModel):
    last: Optional[BookingShort] = None
    next: Optional[BookingShort] = None
