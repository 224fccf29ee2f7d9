"""
Van Model
"""

from extensions import db
from datetime import datetime


class Van(db.Model):
    """Fleet vehicle that bookings can be assigned to"""

    __tablename__ = 'vans'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    capacity = db.Column(db.Integer, nullable=False, default=2)
    price_per_day = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255))
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Bookings keep their van_id when a van is removed, so no cascade here
    bookings = db.relationship('Booking', backref='van', lazy='dynamic')

    def to_info(self):
        """Engine view of this van"""
        from app.services.availability_engine import VanInfo

        return VanInfo(id=self.id, name=self.name, is_active=bool(self.is_active))

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'capacity': self.capacity,
            'price_per_day': float(self.price_per_day or 0),
            'image_url': self.image_url,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Van {self.name}>'
