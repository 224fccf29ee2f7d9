"""
Calendar date parsing
Dates are timezone-naive calendar days, always exchanged as YYYY-MM-DD
"""

from datetime import date, datetime
from app.utils.errors import MalformedDateError

DATE_FORMAT = '%Y-%m-%d'


def parse_date(value, field='date'):
    """Parse a YYYY-MM-DD string (or pass a date through) into a date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise MalformedDateError(f'{field} is required in YYYY-MM-DD format')
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise MalformedDateError(f'{field} must be a valid date in YYYY-MM-DD format, got {value!r}')


def format_date(value):
    return value.isoformat() if value else None
