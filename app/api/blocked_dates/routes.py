from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from app.models.blocked_date import BlockedDate
from app.services.availability_engine import DateRange
from app.services.change_feed import get_change_feed
from app.utils.errors import AvailabilityError
from datetime import datetime

blocked_dates_bp = Blueprint('blocked_dates', __name__)


@blocked_dates_bp.route('/', methods=['GET'])
@jwt_required()
def get_blocked_dates():
    """Get all blocked date ranges"""
    try:
        blocked_dates = BlockedDate.query.order_by(BlockedDate.start_date.asc()).all()

        return jsonify({
            'blocked_dates': [bd.to_dict() for bd in blocked_dates],
            'total': len(blocked_dates)
        }), 200

    except Exception as e:
        current_app.logger.error(f'Error fetching blocked dates: {str(e)}')
        return jsonify({'error': str(e)}), 500


@blocked_dates_bp.route('/', methods=['POST'])
@jwt_required()
def block_dates():
    """Block a date range"""
    try:
        data = request.get_json() or {}

        if not data.get('start_date') or not data.get('end_date'):
            return jsonify({'error': 'start_date and end_date required'}), 400

        # Overlapping ranges are allowed; a day is blocked if any range covers it
        blocked_range = DateRange.parse(data['start_date'], data['end_date'])

        new_block = BlockedDate(
            start_date=blocked_range.start,
            end_date=blocked_range.end,
            reason=data.get('reason') or None,
            created_by=get_jwt_identity()
        )

        db.session.add(new_block)
        db.session.commit()

        get_change_feed().publish('blocked_dates', 'insert', new_block.id)

        return jsonify({'message': 'Dates blocked', 'data': new_block.to_dict()}), 201

    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error saving blocked date: {str(e)}')
        return jsonify({'error': str(e)}), 500


@blocked_dates_bp.route('/<int:blocked_date_id>', methods=['PUT'])
@jwt_required()
def update_blocked_dates(blocked_date_id):
    """Update a blocked date range"""
    try:
        blocked = db.session.get(BlockedDate, blocked_date_id)

        if not blocked:
            return jsonify({'error': 'Blocked date not found'}), 404

        data = request.get_json() or {}

        if not data.get('start_date') or not data.get('end_date'):
            return jsonify({'error': 'start_date and end_date required'}), 400

        blocked_range = DateRange.parse(data['start_date'], data['end_date'])

        blocked.start_date = blocked_range.start
        blocked.end_date = blocked_range.end
        blocked.reason = data.get('reason') or None
        blocked.updated_at = datetime.utcnow()
        db.session.commit()

        get_change_feed().publish('blocked_dates', 'update', blocked.id)

        return jsonify({'message': 'Blocked dates updated', 'data': blocked.to_dict()}), 200

    except AvailabilityError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating blocked date {blocked_date_id}: {str(e)}')
        return jsonify({'error': str(e)}), 500


@blocked_dates_bp.route('/<int:blocked_date_id>', methods=['DELETE'])
@jwt_required()
def unblock_dates(blocked_date_id):
    """Remove a blocked date range"""
    try:
        blocked = db.session.get(BlockedDate, blocked_date_id)

        if not blocked:
            return jsonify({'error': 'Blocked date not found'}), 404

        db.session.delete(blocked)
        db.session.commit()

        get_change_feed().publish('blocked_dates', 'delete', blocked_date_id)

        return jsonify({'message': 'Dates unblocked'}), 200

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting blocked date {blocked_date_id}: {str(e)}')
        return jsonify({'error': str(e)}), 500
