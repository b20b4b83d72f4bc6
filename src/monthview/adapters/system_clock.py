"""System clock adapter."""

from datetime import date, datetime


class SystemClock:
    """
    Wall-clock time from the host.

    Implements Clock protocol.
    """

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return date.today()


class FixedClock:
    """
    A clock frozen at a given moment.

    Implements Clock protocol. Used by tests and for replaying a session.
    """

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def today(self) -> date:
        return self.moment.date()
