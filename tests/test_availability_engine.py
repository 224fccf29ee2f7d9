"""Availability engine unit tests."""

from datetime import date

import pytest

from app.models.booking import BookingStatus
from app.services.availability_engine import (
    AvailabilitySnapshot,
    BlockedPeriod,
    BookingSlot,
    DateRange,
    UNKNOWN_VAN_NAME,
    VanInfo,
    blocking_reason_for_date,
    blocking_reasons_for_date,
    bookings_on_date,
    find_conflicts,
    has_conflict,
    is_date_blocked,
    month_calendar,
    range_overlaps,
    trip_duration_days,
    vans_occupied_on_date,
)
from app.utils.errors import InvalidFilterError, MalformedDateError


def _range(start, end):
    return DateRange.parse(start, end)


def _period(pid, start, end, reason=None):
    return BlockedPeriod(id=pid, range=_range(start, end), reason=reason)


def _booking(bid, van_id, start, end, status=BookingStatus.APPROVED):
    return BookingSlot(id=bid, van_id=van_id, range=_range(start, end), status=status)


class TestDateRange:

    def test_parse_iso_strings(self):
        r = DateRange.parse('2024-01-01', '2024-01-05')
        assert r.start == date(2024, 1, 1)
        assert r.end == date(2024, 1, 5)

    def test_inverted_range_is_rejected(self):
        with pytest.raises(MalformedDateError):
            DateRange.parse('2024-01-05', '2024-01-01')

    @pytest.mark.parametrize('bad', ['2024-13-01', 'not-a-date', '', None, '01/02/2024'])
    def test_unparseable_dates_fail_fast(self, bad):
        with pytest.raises(MalformedDateError):
            DateRange.parse(bad, '2024-01-05')

    def test_single_day_range(self):
        r = DateRange.single_day(date(2024, 2, 29))
        assert r.contains(date(2024, 2, 29))
        assert r.day_count == 1

    def test_day_count_is_inclusive(self):
        assert _range('2024-06-10', '2024-06-15').day_count == 6


class TestRangeOverlaps:

    def test_shared_boundary_day_overlaps(self):
        assert range_overlaps(_range('2024-01-01', '2024-01-05'), _range('2024-01-05', '2024-01-10'))

    def test_adjacent_ranges_do_not_overlap(self):
        assert not range_overlaps(_range('2024-01-01', '2024-01-05'), _range('2024-01-06', '2024-01-10'))

    @pytest.mark.parametrize('a, b', [
        (('2024-01-01', '2024-01-05'), ('2024-01-03', '2024-01-04')),
        (('2024-01-01', '2024-01-05'), ('2024-01-06', '2024-01-06')),
        (('2024-03-01', '2024-03-31'), ('2024-02-01', '2024-03-01')),
        (('2024-03-01', '2024-03-02'), ('2024-01-01', '2024-01-02')),
    ])
    def test_symmetry(self, a, b):
        ra, rb = _range(*a), _range(*b)
        assert range_overlaps(ra, rb) == range_overlaps(rb, ra)


class TestBlockedDates:

    def test_closed_interval_endpoints_are_blocked(self):
        periods = [_period(1, '2024-06-10', '2024-06-15')]
        assert is_date_blocked(date(2024, 6, 10), periods)
        assert is_date_blocked(date(2024, 6, 15), periods)
        assert not is_date_blocked(date(2024, 6, 9), periods)
        assert not is_date_blocked(date(2024, 6, 16), periods)

    def test_no_periods_means_available(self):
        assert not is_date_blocked(date(2024, 6, 10), [])
        assert blocking_reason_for_date(date(2024, 6, 10), []) is None

    def test_overlapping_periods_first_reason_wins(self):
        periods = [
            _period(1, '2024-06-10', '2024-06-15', 'Maintenance'),
            _period(2, '2024-06-12', '2024-06-20', 'Holiday'),
        ]
        assert blocking_reason_for_date(date(2024, 6, 13), periods) == 'Maintenance'
        assert blocking_reason_for_date(date(2024, 6, 18), periods) == 'Holiday'

    def test_all_reasons_listed_without_duplicates(self):
        periods = [
            _period(1, '2024-06-10', '2024-06-15', 'Maintenance'),
            _period(2, '2024-06-12', '2024-06-20', None),
            _period(3, '2024-06-13', '2024-06-13', 'Holiday'),
            _period(4, '2024-06-01', '2024-06-30', 'Maintenance'),
        ]
        assert blocking_reasons_for_date(date(2024, 6, 13), periods) == ['Maintenance', 'Holiday']

    def test_first_matching_period_without_reason(self):
        periods = [
            _period(1, '2024-06-10', '2024-06-15'),
            _period(2, '2024-06-10', '2024-06-15', 'Holiday'),
        ]
        assert blocking_reason_for_date(date(2024, 6, 11), periods) is None


class TestVanOccupancy:

    def test_no_duplicates_for_van_with_two_bookings(self):
        bookings = [
            _booking(1, 'V1', '2024-06-01', '2024-06-10'),
            _booking(2, 'V1', '2024-06-05', '2024-06-07', BookingStatus.PENDING),
        ]
        assert vans_occupied_on_date(date(2024, 6, 6), bookings) == {'V1'}

    @pytest.mark.parametrize('status', [
        BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED,
    ])
    def test_non_occupying_statuses_are_ignored(self, status):
        bookings = [_booking(1, 'V1', '2024-06-01', '2024-06-10', status)]
        assert vans_occupied_on_date(date(2024, 6, 5), bookings) == set()

    def test_unassigned_bookings_are_ignored(self):
        bookings = [_booking(1, None, '2024-06-01', '2024-06-10')]
        assert vans_occupied_on_date(date(2024, 6, 5), bookings) == set()

    def test_active_van_filter(self):
        bookings = [
            _booking(1, 'V1', '2024-06-01', '2024-06-10'),
            _booking(2, 'V2', '2024-06-01', '2024-06-10'),
        ]
        assert vans_occupied_on_date(date(2024, 6, 5), bookings, active_van_ids={'V2'}) == {'V2'}

    def test_bookings_on_date_keeps_every_status_in_order(self):
        bookings = [
            _booking(1, 'V1', '2024-06-01', '2024-06-10', BookingStatus.CANCELLED),
            _booking(2, None, '2024-06-05', '2024-06-05', BookingStatus.PENDING),
            _booking(3, 'V2', '2024-06-06', '2024-06-08'),
        ]
        assert [b.id for b in bookings_on_date(date(2024, 6, 5), bookings)] == [1, 2]

    def test_status_values_are_coerced(self):
        slot = BookingSlot(id=1, van_id='V1', range=_range('2024-06-01', '2024-06-02'), status='approved')
        assert slot.status is BookingStatus.APPROVED
        assert vans_occupied_on_date(date(2024, 6, 1), [slot]) == {'V1'}


class TestConflicts:

    def test_overlapping_booking_for_same_van_conflicts(self):
        bookings = [_booking(1, 'V1', '2024-06-10', '2024-06-15')]
        assert has_conflict(_range('2024-06-15', '2024-06-18'), 'V1', bookings)
        assert not has_conflict(_range('2024-06-16', '2024-06-18'), 'V1', bookings)

    def test_other_van_does_not_conflict(self):
        bookings = [_booking(1, 'V1', '2024-06-10', '2024-06-15')]
        assert not has_conflict(_range('2024-06-10', '2024-06-15'), 'V2', bookings)

    def test_released_bookings_do_not_conflict(self):
        bookings = [_booking(1, 'V1', '2024-06-10', '2024-06-15', BookingStatus.REJECTED)]
        assert not has_conflict(_range('2024-06-10', '2024-06-15'), 'V1', bookings)

    def test_booking_can_exclude_itself(self):
        bookings = [_booking(1, 'V1', '2024-06-10', '2024-06-15')]
        assert not has_conflict(_range('2024-06-10', '2024-06-15'), 'V1', bookings, exclude_booking_id=1)

    def test_conflict_check_needs_a_van(self):
        with pytest.raises(InvalidFilterError):
            has_conflict(_range('2024-06-10', '2024-06-15'), None, [])

    def test_find_conflicts_reports_blocked_periods_then_bookings(self):
        periods = [_period(7, '2024-06-01', '2024-06-11', 'Maintenance')]
        bookings = [_booking(3, 'V1', '2024-06-14', '2024-06-20')]
        conflicts = find_conflicts(_range('2024-06-10', '2024-06-14'), 'V1', bookings, periods)
        assert [(c.kind, c.id) for c in conflicts] == [('blocked_period', 7), ('booking', 3)]
        assert conflicts[0].to_dict()['reason'] == 'Maintenance'

    def test_find_conflicts_without_van_only_checks_blocked_periods(self):
        periods = [_period(7, '2024-06-01', '2024-06-11')]
        bookings = [_booking(3, 'V1', '2024-06-10', '2024-06-20')]
        conflicts = find_conflicts(_range('2024-06-12', '2024-06-14'), None, bookings, periods)
        assert conflicts == []


class TestTripDuration:

    def test_week_long_trip(self):
        assert trip_duration_days(_range('2024-03-01', '2024-03-08')) == 7

    def test_same_day_trip(self):
        assert trip_duration_days(_range('2024-03-01', '2024-03-01')) == 0

    def test_duration_and_blocked_day_count_differ_by_one(self):
        r = _range('2024-03-01', '2024-03-02')
        assert trip_duration_days(r) == 1
        assert r.day_count == 2


class TestSnapshot:

    @pytest.fixture
    def snapshot(self):
        return AvailabilitySnapshot(
            blocked_periods=[_period(1, '2024-06-10', '2024-06-15', 'Maintenance')],
            bookings=[
                _booking(1, 'V1', '2024-06-12', '2024-06-20'),
                _booking(2, 'V9', '2024-06-12', '2024-06-13'),
                _booking(3, 'V2', '2024-06-12', '2024-06-13'),
            ],
            vans=[VanInfo('V1', 'Coconut One'), VanInfo('V2', 'Coconut Two', is_active=False)],
        )

    def test_end_to_end_scenario(self):
        periods = [_period(1, '2024-06-10', '2024-06-15', 'Maintenance')]
        bookings = [_booking(1, 'V1', '2024-06-12', '2024-06-20')]

        assert is_date_blocked(date(2024, 6, 12), periods)
        assert blocking_reason_for_date(date(2024, 6, 12), periods) == 'Maintenance'
        assert vans_occupied_on_date(date(2024, 6, 12), bookings) == {'V1'}
        assert vans_occupied_on_date(date(2024, 6, 16), bookings) == {'V1'}
        assert not is_date_blocked(date(2024, 6, 16), periods)

    def test_scheduling_view_only_counts_active_vans(self, snapshot):
        assert snapshot.vans_occupied_on_date(date(2024, 6, 12)) == {'V1'}
        assert len(snapshot.bookings_on_date(date(2024, 6, 12))) == 3

    def test_unknown_van_reference_does_not_fail(self, snapshot):
        assert snapshot.van_name('V9') == UNKNOWN_VAN_NAME
        assert snapshot.van_name('V1') == 'Coconut One'

    def test_queries_are_idempotent(self, snapshot):
        day = date(2024, 6, 12)
        first = (
            snapshot.is_date_blocked(day),
            snapshot.blocking_reason_for_date(day),
            snapshot.vans_occupied_on_date(day),
            snapshot.bookings_on_date(day),
            snapshot.has_conflict(_range('2024-06-01', '2024-06-30'), 'V1'),
        )
        second = (
            snapshot.is_date_blocked(day),
            snapshot.blocking_reason_for_date(day),
            snapshot.vans_occupied_on_date(day),
            snapshot.bookings_on_date(day),
            snapshot.has_conflict(_range('2024-06-01', '2024-06-30'), 'V1'),
        )
        assert first == second
        assert len(snapshot.bookings) == 3

    def test_month_calendar(self, snapshot):
        days = month_calendar(2024, 6, snapshot, today=date(2024, 6, 11))
        assert len(days) == 30
        by_day = {d.day: d for d in days}
        assert by_day[date(2024, 6, 10)].is_past
        assert by_day[date(2024, 6, 10)].blocked
        assert by_day[date(2024, 6, 16)].blocked is False
        assert by_day[date(2024, 6, 16)].van_ids == frozenset({'V1'})
        assert by_day[date(2024, 6, 12)].to_dict()['occupied_van_ids'] == ['V1']
        assert by_day[date(2024, 6, 30)].reason is None

    def test_month_calendar_rejects_bad_month(self, snapshot):
        with pytest.raises(MalformedDateError):
            snapshot.month_calendar(2024, 13)
