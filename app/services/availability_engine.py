"""
Availability Engine
Pure queries over a snapshot of blocked periods, bookings and vans

Blocking uses closed intervals: both the first and the last day of a range
are painted unavailable. Trip duration counts nights, so a range from day 0
to day 1 lasts one day.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from app.models.booking import BookingStatus, OCCUPYING_STATUSES
from app.utils.dates import parse_date
from app.utils.errors import InvalidFilterError, MalformedDateError

UNKNOWN_VAN_NAME = 'Unknown van'


@dataclass(frozen=True)
class DateRange:
    """Closed range of calendar days"""
    start: date
    end: date

    def __post_init__(self):
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise MalformedDateError('Date range bounds must be calendar dates')
        if self.start > self.end:
            raise MalformedDateError(
                f'Range start {self.start.isoformat()} is after its end {self.end.isoformat()}'
            )

    @classmethod
    def parse(cls, start, end, start_field='start_date', end_field='end_date'):
        return cls(parse_date(start, start_field), parse_date(end, end_field))

    @classmethod
    def single_day(cls, day):
        return cls(day, day)

    def contains(self, day):
        return self.start <= day <= self.end

    def overlaps(self, other):
        return self.start <= other.end and other.start <= self.end

    @property
    def day_count(self):
        """Calendar cells covered, both ends included"""
        return (self.end - self.start).days + 1

    def to_dict(self):
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}


@dataclass(frozen=True)
class BlockedPeriod:
    id: Any
    range: DateRange
    reason: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BookingSlot:
    """The part of a booking that matters for availability"""
    id: Any
    van_id: Any
    range: DateRange
    status: BookingStatus = BookingStatus.PENDING

    def __post_init__(self):
        object.__setattr__(self, 'status', BookingStatus(self.status))

    @property
    def is_occupying(self):
        return self.status in OCCUPYING_STATUSES

    def to_dict(self):
        return {
            'id': self.id,
            'van_id': self.van_id,
            'departure_date': self.range.start.isoformat(),
            'return_date': self.range.end.isoformat(),
            'status': self.status.value,
        }


@dataclass(frozen=True)
class VanInfo:
    id: Any
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class Conflict:
    """A blocked period or booking that collides with a proposed range"""
    kind: str  # 'blocked_period' or 'booking'
    id: Any
    range: DateRange
    reason: Optional[str] = None
    van_id: Any = None

    def to_dict(self):
        data = {'kind': self.kind, 'id': self.id, **self.range.to_dict()}
        if self.kind == 'blocked_period':
            data['reason'] = self.reason
        else:
            data['van_id'] = self.van_id
        return data


@dataclass(frozen=True)
class CalendarDay:
    day: date
    blocked: bool
    reason: Optional[str]
    van_ids: frozenset
    is_past: bool

    def to_dict(self):
        return {
            'date': self.day.isoformat(),
            'blocked': self.blocked,
            'reason': self.reason,
            'occupied_van_ids': sorted(self.van_ids, key=str),
            'is_past': self.is_past,
        }


def range_overlaps(a, b):
    """Closed ranges overlap when each starts no later than the other ends"""
    return a.start <= b.end and b.start <= a.end


def is_date_blocked(day, blocked_periods):
    return any(period.range.contains(day) for period in blocked_periods)


def blocking_reason_for_date(day, blocked_periods):
    """
    Reason of the first period covering the day, in iteration order.
    Overlapping periods with different reasons are not merged.
    """
    for period in blocked_periods:
        if period.range.contains(day):
            return period.reason
    return None


def blocking_reasons_for_date(day, blocked_periods):
    """Every distinct non-empty reason covering the day, first seen first"""
    reasons = []
    for period in blocked_periods:
        if period.range.contains(day) and period.reason and period.reason not in reasons:
            reasons.append(period.reason)
    return reasons


def vans_occupied_on_date(day, bookings, active_van_ids=None):
    """
    Distinct van ids held by pending or approved bookings on the day.

    Unassigned bookings are ignored. When active_van_ids is given, vans
    outside it are left out of the result.
    """
    occupied = set()
    for booking in bookings:
        if booking.van_id is None or not booking.is_occupying:
            continue
        if not booking.range.contains(day):
            continue
        if active_van_ids is not None and booking.van_id not in active_van_ids:
            continue
        occupied.add(booking.van_id)
    return occupied


def bookings_on_date(day, bookings):
    """All bookings whose range covers the day, whatever their status"""
    return [booking for booking in bookings if booking.range.contains(day)]


def has_conflict(proposed_range, van_id, existing_bookings, exclude_booking_id=None):
    """Check if a pending or approved booking already holds the van for any of these days"""
    return bool(_booking_conflicts(proposed_range, van_id, existing_bookings, exclude_booking_id))


def _booking_conflicts(proposed_range, van_id, existing_bookings, exclude_booking_id=None):
    if van_id is None:
        raise InvalidFilterError('A van is required to check booking conflicts')
    return [
        booking for booking in existing_bookings
        if booking.van_id == van_id
        and booking.is_occupying
        and (exclude_booking_id is None or booking.id != exclude_booking_id)
        and range_overlaps(proposed_range, booking.range)
    ]


def find_conflicts(proposed_range, van_id, bookings, blocked_periods, exclude_booking_id=None):
    """Blocked periods overlapping the range, then bookings holding the van"""
    conflicts = [
        Conflict(kind='blocked_period', id=period.id, range=period.range, reason=period.reason)
        for period in blocked_periods
        if range_overlaps(proposed_range, period.range)
    ]
    if van_id is not None:
        conflicts.extend(
            Conflict(kind='booking', id=booking.id, range=booking.range, van_id=booking.van_id)
            for booking in _booking_conflicts(proposed_range, van_id, bookings, exclude_booking_id)
        )
    return conflicts


def trip_duration_days(date_range):
    return abs((date_range.end - date_range.start).days)


def month_days(year, month):
    try:
        _, last_day = calendar.monthrange(year, month)
        return [date(year, month, day) for day in range(1, last_day + 1)]
    except (ValueError, TypeError):
        raise MalformedDateError(f'Invalid calendar month {year}-{month}')


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """Immutable point-in-time copy of what availability queries read"""
    blocked_periods: tuple = ()
    bookings: tuple = ()
    vans: tuple = ()
    loaded_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        # Frozen dataclass: normalise inputs to tuples through object.__setattr__
        object.__setattr__(self, 'blocked_periods', tuple(self.blocked_periods))
        object.__setattr__(self, 'bookings', tuple(self.bookings))
        object.__setattr__(self, 'vans', tuple(self.vans))

    @property
    def active_vans(self):
        return tuple(van for van in self.vans if van.is_active)

    @property
    def active_van_ids(self):
        return frozenset(van.id for van in self.vans if van.is_active)

    def van_name(self, van_id):
        for van in self.vans:
            if van.id == van_id:
                return van.name
        return UNKNOWN_VAN_NAME

    def is_date_blocked(self, day):
        return is_date_blocked(day, self.blocked_periods)

    def blocking_reason_for_date(self, day):
        return blocking_reason_for_date(day, self.blocked_periods)

    def blocking_reasons_for_date(self, day):
        return blocking_reasons_for_date(day, self.blocked_periods)

    def vans_occupied_on_date(self, day):
        """Scheduling view: only vans in the active fleet"""
        return vans_occupied_on_date(day, self.bookings, self.active_van_ids)

    def bookings_on_date(self, day):
        return bookings_on_date(day, self.bookings)

    def has_conflict(self, proposed_range, van_id, exclude_booking_id=None):
        return has_conflict(proposed_range, van_id, self.bookings, exclude_booking_id)

    def find_conflicts(self, proposed_range, van_id=None, exclude_booking_id=None):
        return find_conflicts(proposed_range, van_id, self.bookings,
                              self.blocked_periods, exclude_booking_id)

    def month_calendar(self, year, month, today=None):
        return month_calendar(year, month, self, today)


def month_calendar(year, month, snapshot, today=None):
    """One CalendarDay per day of the month, for painting the availability grid"""
    today = today or date.today()
    active = snapshot.active_van_ids
    return [
        CalendarDay(
            day=day,
            blocked=is_date_blocked(day, snapshot.blocked_periods),
            reason=blocking_reason_for_date(day, snapshot.blocked_periods),
            van_ids=frozenset(vans_occupied_on_date(day, snapshot.bookings, active)),
            is_past=day < today,
        )
        for day in month_days(year, month)
    ]
