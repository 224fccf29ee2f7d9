from extensions import db
from datetime import datetime

class BlockedDate(db.Model):
    """Closed date range during which no van can be booked"""
    __tablename__ = 'blocked_dates'

    id = db.Column(db.Integer, primary_key=True)
    start_date = db.Column(db.Date, nullable=False, index=True)
    end_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.String(255))  # Optional: why it's blocked
    created_by = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_period(self):
        from app.services.availability_engine import BlockedPeriod, DateRange

        return BlockedPeriod(
            id=self.id,
            range=DateRange(self.start_date, self.end_date),
            reason=self.reason,
            created_by=self.created_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'days': (self.end_date - self.start_date).days + 1,
            'reason': self.reason,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
