"""
Booking Service
Booking creation, status changes with audit trail, and van assignment
"""

from datetime import datetime

from flask import current_app

from extensions import db
from app.models.booking import Booking, BookingStatus, OCCUPYING_STATUSES
from app.models.booking_status_history import BookingStatusHistory
from app.services.availability_engine import DateRange, find_conflicts
from app.services.availability_store import AvailabilityStore
from app.utils.dates import parse_date
from app.utils.errors import BookingConflictError, BookingStateError, InvalidFilterError

REQUIRED_FIELDS = ['surname_and_name', 'email', 'birth_date', 'telephone', 'departure_date', 'return_date']

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.APPROVED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.REJECTED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


class BookingService:
    """Booking workflow over an injected database session"""

    def __init__(self, session=None, store=None):
        self.session = session or db.session
        self.store = store or AvailabilityStore(self.session)

    def check_availability(self, date_range, van_id=None, exclude_booking_id=None, include_blocked=True):
        """Conflicts for a proposed range, read fresh from the store"""
        bookings = []
        if van_id is not None:
            bookings = self.store.fetch_bookings(status_in=OCCUPYING_STATUSES, van_id=van_id)
        blocked_periods = self.store.fetch_blocked_periods() if include_blocked else []
        return find_conflicts(date_range, van_id, bookings, blocked_periods, exclude_booking_id)

    def _ensure_available(self, date_range, van_id, exclude_booking_id=None, include_blocked=True):
        if not current_app.config.get('REJECT_CONFLICTING_BOOKINGS', True):
            return
        conflicts = self.check_availability(date_range, van_id, exclude_booking_id, include_blocked)
        if conflicts:
            raise BookingConflictError(conflicts)

    def resolve_van_id(self, van_id):
        if van_id in (None, ''):
            return None
        try:
            van_id = int(van_id)
        except (TypeError, ValueError):
            raise InvalidFilterError(f'van_id must be an integer, got {van_id!r}')
        van = self.store.get_van(van_id)
        if van is None:
            raise LookupError(f'Van {van_id} not found')
        if not van.is_active:
            raise InvalidFilterError(f'Van {van_id} is retired and cannot take bookings')
        return van_id

    def create_booking(self, data):
        """Create a pending booking, rejecting dates that are already taken"""
        missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
        if missing:
            raise ValueError(f'{missing[0]} is required')

        trip = DateRange.parse(data['departure_date'], data['return_date'],
                               'departure_date', 'return_date')
        birth_date = parse_date(data['birth_date'], 'birth_date')
        van_id = self.resolve_van_id(data.get('van_id'))

        self._ensure_available(trip, van_id)

        booking = Booking(
            van_id=van_id,
            surname_and_name=data['surname_and_name'],
            email=data['email'],
            birth_date=birth_date,
            telephone=data['telephone'],
            nationality=data.get('nationality'),
            departure_date=trip.start,
            return_date=trip.end,
            requests=data.get('requests') or None,
            admin_notes=data.get('admin_notes') or None,
            terms_accepted=True,
            status=BookingStatus.PENDING,
        )
        self.session.add(booking)
        self.session.commit()

        current_app.logger.info(f'Booking {booking.id} created for {trip.start} - {trip.end}')
        return booking

    def change_status(self, booking, new_status, changed_by, notes=None):
        """Move a booking to a new status and record the change in its history"""
        try:
            new_status = BookingStatus(new_status)
        except ValueError:
            raise BookingStateError(f'Unknown status: {new_status!r}')

        old_status = booking.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise BookingStateError(f'Cannot change booking from {old_status.value} to {new_status.value}')

        booking.status = new_status
        if new_status in (BookingStatus.APPROVED, BookingStatus.REJECTED):
            booking.approved_by = changed_by
            booking.approved_at = datetime.utcnow()
            booking.admin_notes = notes or None

        # Status and audit row commit together
        self.session.add(BookingStatusHistory(
            booking_id=booking.id,
            old_status=old_status.value,
            new_status=new_status.value,
            changed_by=changed_by,
            notes=notes or None,
        ))
        self.session.commit()

        current_app.logger.info(
            f'Booking {booking.id} status {old_status.value} -> {new_status.value} by {changed_by}'
        )
        return booking

    def assign_van(self, booking, van_id):
        """Set or clear the van of a booking"""
        van_id = self.resolve_van_id(van_id)

        if van_id is not None and booking.status in OCCUPYING_STATUSES:
            trip = DateRange(booking.departure_date, booking.return_date)
            # The dates are not changing, so only other bookings of the van matter
            self._ensure_available(trip, van_id, exclude_booking_id=booking.id, include_blocked=False)

        booking.van_id = van_id
        booking.updated_at = datetime.utcnow()
        self.session.commit()
        return booking

    def status_history(self, booking):
        return (
            self.session.query(BookingStatusHistory)
            .filter_by(booking_id=booking.id)
            .order_by(BookingStatusHistory.created_at.desc(), BookingStatusHistory.id.desc())
            .all()
        )
