"""
Booking Model
"""

from extensions import db
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    """Booking status enum"""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


# Statuses that hold a van for their dates
OCCUPYING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.APPROVED})


class Booking(db.Model):
    """Campervan rental request"""

    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    van_id = db.Column(db.Integer, db.ForeignKey('vans.id'), nullable=True, index=True)

    # Customer Details
    surname_and_name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    birth_date = db.Column(db.Date, nullable=False)
    telephone = db.Column(db.String(40), nullable=False)
    nationality = db.Column(db.String(80))

    # Trip Details
    departure_date = db.Column(db.Date, nullable=False, index=True)
    return_date = db.Column(db.Date, nullable=False)
    requests = db.Column(db.Text)
    terms_accepted = db.Column(db.Boolean, default=False, nullable=False)

    # Status
    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False)
    admin_notes = db.Column(db.Text)
    approved_by = db.Column(db.String(120))
    approved_at = db.Column(db.DateTime)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    history = db.relationship('BookingStatusHistory', backref='booking', lazy='dynamic')

    def __init__(self, **kwargs):
        """Initialize booking"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def is_occupying(self):
        """Check if booking holds its van for its dates"""
        return self.status in OCCUPYING_STATUSES

    def to_slot(self):
        """Engine view of this booking"""
        from app.services.availability_engine import BookingSlot, DateRange

        return BookingSlot(
            id=self.id,
            van_id=self.van_id,
            range=DateRange(self.departure_date, self.return_date),
            status=self.status,
        )

    def to_dict(self, include_van=False):
        """Convert booking to dictionary"""
        data = {
            'id': self.id,
            'van_id': self.van_id,
            'surname_and_name': self.surname_and_name,
            'email': self.email,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'telephone': self.telephone,
            'nationality': self.nationality,
            'departure_date': self.departure_date.isoformat() if self.departure_date else None,
            'return_date': self.return_date.isoformat() if self.return_date else None,
            'duration_days': abs((self.return_date - self.departure_date).days),
            'requests': self.requests,
            'terms_accepted': self.terms_accepted,
            'status': self.status.value,
            'admin_notes': self.admin_notes,
            'approved_by': self.approved_by,
            'approved_at': self.approved_at.isoformat() if self.approved_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_van:
            data['van'] = self.van.to_dict() if self.van else None

        return data

    def __repr__(self):
        return f'<Booking {self.id} - Van {self.van_id}>'
