"""
Services Package
Availability queries, booking workflow and change notifications
"""

from app.services.availability_engine import AvailabilitySnapshot, DateRange
from app.services.availability_store import AvailabilityStore
from app.services.availability_service import AvailabilityService, get_availability_service
from app.services.booking_service import BookingService
from app.services.change_feed import ChangeFeed, get_change_feed

__all__ = [
    'AvailabilitySnapshot',
    'DateRange',
    'AvailabilityStore',
    'AvailabilityService',
    'get_availability_service',
    'BookingService',
    'ChangeFeed',
    'get_change_feed',
]
