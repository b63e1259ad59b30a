import datetime
from dataclasses import dataclass


@dataclass(frozen=True)
class TimeWindow:
    """
    The [start, end) interval a booking reserves an item for.

    A window is only checked for ``start < end`` when a booking is created,
    so an instance may hold an invalid interval until then.
    """
    start: datetime.datetime
    end: datetime.datetime

    @property
    def is_ordered(self) -> bool:
        return self.start < self.end

    def starts_before(self, moment: datetime.datetime) -> bool:
        return self.start < moment

    def contains(self, moment: datetime.datetime) -> bool:
        # End is exclusive
        return self.start <= moment < self.end

    def has_ended(self, moment: datetime.datetime) -> bool:
        return self.end < moment

    def is_upcoming(self, moment: datetime.datetime) -> bool:
        return self.start > moment
