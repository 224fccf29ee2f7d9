"""Test fixtures for the campervan admin backend."""

from datetime import date

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from app.models import BlockedDate, Booking, BookingStatus, Van
from extensions import db

STAFF_EMAIL = 'staff@coconutroads.test'


class FakePusher:
    """Records triggers instead of calling Pusher"""

    def __init__(self, fail=False):
        self.fail = fail
        self.triggered = []

    def trigger(self, channel, event, data):
        if self.fail:
            raise RuntimeError('pusher unavailable')
        self.triggered.append((channel, event, data))


@pytest.fixture
def pusher():
    return FakePusher()


@pytest.fixture
def app(pusher):
    app = create_app('testing', pusher_client=pusher)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity=STAFF_EMAIL)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def make_van(app):
    def _make_van(name='Coconut One', is_active=True):
        van = Van(name=name, capacity=2, price_per_day=90, is_active=is_active)
        db.session.add(van)
        db.session.commit()
        return van
    return _make_van


@pytest.fixture
def make_booking(app):
    def _make_booking(departure, return_date, van=None, status=BookingStatus.APPROVED, name='Jane Doe'):
        booking = Booking(
            van_id=van.id if van is not None else None,
            surname_and_name=name,
            email='jane@example.com',
            birth_date=date(1990, 1, 1),
            telephone='+66 123 456 789',
            departure_date=departure,
            return_date=return_date,
            terms_accepted=True,
            status=status,
        )
        db.session.add(booking)
        db.session.commit()
        return booking
    return _make_booking


@pytest.fixture
def make_blocked(app):
    def _make_blocked(start, end, reason=None):
        blocked = BlockedDate(start_date=start, end_date=end, reason=reason, created_by=STAFF_EMAIL)
        db.session.add(blocked)
        db.session.commit()
        return blocked
    return _make_blocked


@pytest.fixture
def booking_payload():
    def _booking_payload(**overrides):
        payload = {
            'surname_and_name': 'John Doe',
            'email': 'john@example.com',
            'birth_date': '1988-04-02',
            'telephone': '+66 987 654 321',
            'departure_date': '2024-07-01',
            'return_date': '2024-07-05',
        }
        payload.update(overrides)
        return payload
    return _booking_payload
