"""
Bookings Blueprint
"""

from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db, limiter
from app.models.booking import Booking
from app.services.booking_service import BookingService
from app.services.change_feed import get_change_feed
from app.utils.errors import AvailabilityError, BookingConflictError, BookingStateError

bookings_bp = Blueprint('bookings', __name__)


def _conflict_response(error):
    return jsonify({
        'error': 'Van not available for selected dates',
        'conflicts': [conflict.to_dict() for conflict in error.conflicts]
    }), 409


@bookings_bp.route('/', methods=['POST'])
@jwt_required()
@limiter.limit("60 per hour")
def create_booking():
    """Create a new booking"""
    try:
        data = request.get_json() or {}
        booking = BookingService().create_booking(data)

        get_change_feed().publish('bookings', 'insert', booking.id)

        return jsonify({
            'message': 'Booking created successfully',
            'booking': booking.to_dict(include_van=True)
        }), 201

    except BookingConflictError as e:
        return _conflict_response(e)
    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except LookupError as e:
        return jsonify({'error': str(e)}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error adding booking: {str(e)}')
        return jsonify({'error': str(e)}), 500


@bookings_bp.route('/<int:booking_id>/status', methods=['PATCH'])
@jwt_required()
def update_booking_status(booking_id):
    """Approve, reject, cancel or complete a booking"""
    try:
        booking = db.session.get(Booking, booking_id)

        if not booking:
            return jsonify({'error': 'Booking not found'}), 404

        data = request.get_json() or {}
        if not data.get('status'):
            return jsonify({'error': 'status is required'}), 400

        changed_by = get_jwt_identity() or current_app.config['DEFAULT_CHANGED_BY']
        BookingService().change_status(booking, data['status'], changed_by, data.get('notes'))

        get_change_feed().publish('bookings', 'update', booking.id)

        return jsonify({
            'message': f'Booking {booking.status.value}',
            'booking': booking.to_dict()
        }), 200

    except BookingStateError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating booking {booking_id}: {str(e)}')
        return jsonify({'error': str(e)}), 500


@bookings_bp.route('/<int:booking_id>/van', methods=['PATCH'])
@jwt_required()
def assign_van(booking_id):
    """Assign a van to a booking, or clear it with van_id null"""
    try:
        booking = db.session.get(Booking, booking_id)

        if not booking:
            return jsonify({'error': 'Booking not found'}), 404

        data = request.get_json() or {}
        if 'van_id' not in data:
            return jsonify({'error': 'van_id is required'}), 400

        BookingService().assign_van(booking, data['van_id'])

        get_change_feed().publish('bookings', 'update', booking.id)

        return jsonify({
            'message': 'Van assignment updated',
            'booking': booking.to_dict(include_van=True)
        }), 200

    except BookingConflictError as e:
        return _conflict_response(e)
    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except LookupError as e:
        return jsonify({'error': str(e)}), 404
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating van assignment for booking {booking_id}: {str(e)}')
        return jsonify({'error': str(e)}), 500


@bookings_bp.route('/<int:booking_id>/history', methods=['GET'])
@jwt_required()
def get_status_history(booking_id):
    """Timeline of status changes, newest first"""
    try:
        booking = db.session.get(Booking, booking_id)

        if not booking:
            return jsonify({'error': 'Booking not found'}), 404

        history = BookingService().status_history(booking)

        return jsonify({
            'booking_id': booking_id,
            'history': [entry.to_dict() for entry in history]
        }), 200

    except Exception as e:
        current_app.logger.error(f'Error fetching status history for booking {booking_id}: {str(e)}')
        return jsonify({'error': str(e)}), 500
