"""
Availability Store
Loads availability snapshots from the database
"""

from datetime import datetime

from app.models.blocked_date import BlockedDate
from app.models.booking import Booking, BookingStatus
from app.models.van import Van
from app.services.availability_engine import AvailabilitySnapshot
from app.utils.errors import InvalidFilterError


def _coerce_statuses(status_in):
    statuses = set()
    for status in status_in:
        try:
            statuses.add(BookingStatus(status))
        except ValueError:
            raise InvalidFilterError(f'Unsupported booking status: {status!r}')
    return statuses


class AvailabilityStore:
    """Reads blocked periods, bookings and vans through an injected session"""

    def __init__(self, session):
        self.session = session

    def fetch_blocked_periods(self):
        rows = (
            self.session.query(BlockedDate)
            .order_by(BlockedDate.start_date.asc(), BlockedDate.id.asc())
            .all()
        )
        return [row.to_period() for row in rows]

    def fetch_bookings(self, status_in=None, van_id=None):
        """Bookings ordered by departure date, optionally filtered by status and van"""
        query = self.session.query(Booking)

        if status_in is not None:
            statuses = _coerce_statuses(status_in)
            if not statuses:
                raise InvalidFilterError('status_in must name at least one status')
            query = query.filter(Booking.status.in_(list(statuses)))

        if van_id is not None:
            query = query.filter(Booking.van_id == van_id)

        rows = query.order_by(Booking.departure_date.asc(), Booking.id.asc()).all()
        return [row.to_slot() for row in rows]

    def fetch_vans(self):
        """Every van, retired ones included, ordered by name"""
        rows = self.session.query(Van).order_by(Van.name.asc(), Van.id.asc()).all()
        return [row.to_info() for row in rows]

    def fetch_active_vans(self):
        rows = (
            self.session.query(Van)
            .filter(Van.is_active.is_(True))
            .order_by(Van.name.asc(), Van.id.asc())
            .all()
        )
        return [row.to_info() for row in rows]

    def get_van(self, van_id):
        return self.session.get(Van, van_id)

    def van_exists(self, van_id):
        return self.get_van(van_id) is not None

    def load_snapshot(self):
        return AvailabilitySnapshot(
            blocked_periods=self.fetch_blocked_periods(),
            bookings=self.fetch_bookings(),
            vans=self.fetch_vans(),
            loaded_at=datetime.utcnow(),
        )
