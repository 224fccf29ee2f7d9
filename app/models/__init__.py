"""
Models package initialization
Import all models here for easy access
"""

from app.models.van import Van
from app.models.booking import Booking, BookingStatus, OCCUPYING_STATUSES
from app.models.blocked_date import BlockedDate
from app.models.booking_status_history import BookingStatusHistory

__all__ = [
    'Van',
    'Booking',
    'BookingStatus',
    'OCCUPYING_STATUSES',
    'BlockedDate',
    'BookingStatusHistory',
]
