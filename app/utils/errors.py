"""
Typed failures raised by the availability engine and the booking workflow
"""


class AvailabilityError(Exception):
    """Base class for local validation failures"""


class MalformedDateError(AvailabilityError, ValueError):
    """Unparseable calendar date, or a range whose start is after its end"""


class InvalidFilterError(AvailabilityError):
    """Unsupported status / van filter combination"""


class BookingStateError(Exception):
    """Status transition not allowed from the booking's current status"""


class BookingConflictError(Exception):
    """Proposed dates collide with a blocked period or another booking"""

    def __init__(self, conflicts):
        self.conflicts = list(conflicts)
        super().__init__(f'{len(self.conflicts)} conflicting period(s) for the selected dates')
