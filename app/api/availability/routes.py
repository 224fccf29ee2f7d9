"""
Availability Routes
Calendar and conflict queries over the current availability snapshot
"""

from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import jwt_required
from datetime import date
from app.services.availability_engine import DateRange, trip_duration_days
from app.services.availability_service import get_availability_service
from app.services.booking_service import BookingService
from app.utils.dates import parse_date
from app.utils.errors import AvailabilityError, InvalidFilterError

availability_bp = Blueprint('availability', __name__)


def _int_arg(name, default):
    value = request.args.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise InvalidFilterError(f'{name} must be an integer, got {value!r}')


@availability_bp.route('/dates/<day>', methods=['GET'])
@jwt_required()
def get_day(day):
    """Blocked state, occupied vans and bookings for one calendar day"""
    try:
        day = parse_date(day)
        snapshot = get_availability_service().snapshot()
        occupied = snapshot.vans_occupied_on_date(day)

        return jsonify({
            'date': day.isoformat(),
            'blocked': snapshot.is_date_blocked(day),
            'reason': snapshot.blocking_reason_for_date(day),
            'reasons': snapshot.blocking_reasons_for_date(day),
            'occupied_vans': [
                {'id': van_id, 'name': snapshot.van_name(van_id)}
                for van_id in sorted(occupied, key=str)
            ],
            'bookings': [
                dict(slot.to_dict(), van_name=snapshot.van_name(slot.van_id) if slot.van_id is not None else None)
                for slot in snapshot.bookings_on_date(day)
            ]
        }), 200

    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f'Error reading availability for {day}: {str(e)}')
        return jsonify({'error': str(e)}), 500


@availability_bp.route('/calendar', methods=['GET'])
@jwt_required()
def get_calendar():
    """Month grid for the availability calendar"""
    try:
        today = date.today()
        year = _int_arg('year', today.year)
        month = _int_arg('month', today.month)

        snapshot = get_availability_service().snapshot()
        days = snapshot.month_calendar(year, month, today=today)

        return jsonify({
            'year': year,
            'month': month,
            'days': [calendar_day.to_dict() for calendar_day in days]
        }), 200

    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f'Error building calendar: {str(e)}')
        return jsonify({'error': str(e)}), 500


@availability_bp.route('/check', methods=['POST'])
@jwt_required()
def check_availability():
    """Conflicts and trip length for a proposed booking"""
    try:
        data = request.get_json() or {}
        trip = DateRange.parse(data.get('departure_date'), data.get('return_date'),
                               'departure_date', 'return_date')
        service = BookingService()
        van_id = service.resolve_van_id(data.get('van_id'))
        exclude_booking_id = data.get('exclude_booking_id')
        if exclude_booking_id is not None and not isinstance(exclude_booking_id, int):
            return jsonify({'error': 'exclude_booking_id must be an integer'}), 400

        conflicts = service.check_availability(trip, van_id=van_id, exclude_booking_id=exclude_booking_id)

        return jsonify({
            'available': not conflicts,
            'duration_days': trip_duration_days(trip),
            'conflicts': [conflict.to_dict() for conflict in conflicts]
        }), 200

    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except LookupError as e:
        return jsonify({'error': str(e)}), 404
    except Exception as e:
        current_app.logger.error(f'Error checking availability: {str(e)}')
        return jsonify({'error': str(e)}), 500


@availability_bp.route('/vans', methods=['GET'])
@jwt_required()
def get_active_vans():
    """Vans that can be assigned to bookings"""
    try:
        snapshot = get_availability_service().snapshot()

        return jsonify({
            'vans': [{'id': van.id, 'name': van.name} for van in snapshot.active_vans]
        }), 200

    except Exception as e:
        current_app.logger.error(f'Error fetching vans: {str(e)}')
        return jsonify({'error': str(e)}), 500
